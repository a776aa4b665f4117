"""Credential management API routes.

Endpoints:
    GET  /api/credentials/{provider}/status - Current authentication status
    POST /api/credentials/{provider}/upload - Upload a credentials .json file
    POST /api/credentials/{provider}/json   - Save pasted credentials JSON
    POST /api/credentials/{provider}/logout - Remove stored credentials

``provider`` is ``claude`` or ``codex``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette import status

from agent_credentials.core.logging import get_logger
from agent_credentials.exceptions import ErrorType
from agent_credentials.models.credentials import Provider
from agent_credentials.models.status import OperationResult, StatusSnapshot
from agent_credentials.services.credentials import CredentialService


logger = get_logger(__name__)

router = APIRouter(prefix="/api/credentials", tags=["credentials"])


class JsonCredentialsRequest(BaseModel):
    """Request body for pasted credentials."""

    json_text: str = Field(..., alias="json", description="Credentials JSON text")


def get_credential_service(request: Request) -> CredentialService:
    """Return the service attached to the application at startup."""
    service: CredentialService = request.app.state.credential_service
    return service


CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]


def _result_response(result: OperationResult) -> JSONResponse:
    if result.success:
        status_code = status.HTTP_200_OK
    elif result.error_kind is ErrorType.STORAGE_IO_FAILURE:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        status_code = 422
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", exclude_none=True),
    )


@router.get("/{provider}/status", response_model=StatusSnapshot)
async def get_status(provider: Provider, service: CredentialServiceDep) -> StatusSnapshot:
    """Get current authentication status."""
    return service.get_status(provider)


@router.post("/{provider}/upload", response_model=OperationResult)
async def upload_credentials_file(
    provider: Provider,
    service: CredentialServiceDep,
    credentials: Annotated[UploadFile, File(description="Credentials .json file")],
) -> JSONResponse:
    """Upload a credentials file."""
    # Read one byte past the limit so oversized uploads are detected without
    # buffering an arbitrarily large body.
    limit = service.manager(provider).max_upload_bytes
    content = await credentials.read(limit + 1)
    result = service.upload_file(provider, content, credentials.filename)
    return _result_response(result)


@router.post("/{provider}/json", response_model=OperationResult)
async def upload_credentials_json(
    provider: Provider,
    body: JsonCredentialsRequest,
    service: CredentialServiceDep,
) -> JSONResponse:
    """Save credentials from pasted JSON text."""
    result = service.upload_json(provider, body.json_text)
    return _result_response(result)


@router.post("/{provider}/logout", response_model=OperationResult)
async def logout(provider: Provider, service: CredentialServiceDep) -> JSONResponse:
    """Clear credentials (logout)."""
    result = service.logout(provider)
    logger.info("credentials_logout", provider=provider.value, success=result.success)
    return _result_response(result)
