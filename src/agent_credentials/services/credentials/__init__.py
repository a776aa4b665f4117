"""Credentials management package."""

from agent_credentials.exceptions import (
    CredentialsStorageError,
    CredentialValidationError,
    InvalidFieldError,
    InvalidUploadError,
    MalformedJSONError,
    MissingFieldError,
    OversizedPayloadError,
    UnsupportedShapeError,
)
from agent_credentials.services.credentials.manager import CredentialsManager
from agent_credentials.services.credentials.service import CredentialService
from agent_credentials.services.credentials.status import evaluate_status, mask_secret


__all__ = [
    # Managers
    "CredentialService",
    "CredentialsManager",
    # Status
    "evaluate_status",
    "mask_secret",
    # Exceptions
    "CredentialValidationError",
    "CredentialsStorageError",
    "InvalidFieldError",
    "InvalidUploadError",
    "MalformedJSONError",
    "MissingFieldError",
    "OversizedPayloadError",
    "UnsupportedShapeError",
]
