"""Error handling for the credential API server.

Provides unified error handling for all CredentialServiceError subclasses
using their built-in error_type and status_code attributes.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from agent_credentials.exceptions import CredentialServiceError


logger = get_logger(__name__)


def _build_error_response(
    status_code: int, error_type: str, message: str
) -> JSONResponse:
    """Build standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"type": error_type, "message": message},
        },
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""

    @app.exception_handler(CredentialServiceError)
    async def credential_error_handler(
        request: Request, exc: CredentialServiceError
    ) -> JSONResponse:
        """Handle all CredentialServiceError subclasses."""
        logger.error(
            type(exc).__name__,
            error_type=exc.error_type.value,
            error_message=exc.message,
            status_code=exc.status_code,
            request_method=request.method,
            request_url=str(request.url.path),
            **exc.details,
        )
        return _build_error_response(exc.status_code, exc.error_type.value, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions raised by routing."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.debug("HTTP 404", request_url=str(request.url.path))
        else:
            logger.warning(
                "HTTP exception",
                status_code=exc.status_code,
                error_message=exc.detail,
                request_method=request.method,
                request_url=str(request.url.path),
            )
        return _build_error_response(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle all other unhandled exceptions."""
        logger.error(
            "Unhandled exception",
            error_type="unhandled_exception",
            error_message=str(exc),
            request_method=request.method,
            request_url=str(request.url.path),
            exc_info=True,
        )
        return _build_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_server_error",
            "An internal server error occurred",
        )
