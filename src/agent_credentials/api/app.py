"""FastAPI application factory for the credential API server."""

from fastapi import FastAPI
from structlog import get_logger

from agent_credentials import __version__
from agent_credentials.api.middleware.errors import setup_error_handlers
from agent_credentials.api.routes.credentials import router as credentials_router
from agent_credentials.config.settings import Settings, get_settings
from agent_credentials.services.credentials import CredentialService


logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    service: CredentialService | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        service: Pre-built service, mainly for tests

    Returns:
        Configured FastAPI application
    """
    if service is None:
        settings = settings or get_settings()
        service = CredentialService.from_settings(settings)

    app = FastAPI(
        title="Agent Credentials",
        description="Credential management for the Claude Code and Codex CLIs",
        version=__version__,
    )
    app.state.credential_service = service

    setup_error_handlers(app)
    app.include_router(credentials_router)

    logger.debug("app_created", version=__version__)
    return app
