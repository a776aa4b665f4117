"""API routes."""

from agent_credentials.api.routes.credentials import router as credentials_router


__all__ = ["credentials_router"]
