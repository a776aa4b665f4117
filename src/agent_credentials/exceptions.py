"""Consolidated exception hierarchy for the credential service.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Error kind codes surfaced to callers."""

    MALFORMED_JSON = "malformed_json"
    MISSING_FIELD = "missing_field"
    INVALID_FIELD = "invalid_field"
    UNSUPPORTED_SHAPE = "unsupported_shape"
    OVERSIZED_PAYLOAD = "oversized_payload"
    INVALID_UPLOAD = "invalid_upload"
    STORAGE_IO_FAILURE = "storage_io_failure"
    CONFIGURATION = "configuration_error"
    INTERNAL_SERVER = "internal_server_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class CredentialServiceError(Exception):
    """Base exception for all credential service errors.

    Supports HTTP status codes and structured error details.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType = ErrorType.INTERNAL_SERVER,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


# ============================================================================
# Validation Errors (client input)
# ============================================================================


class CredentialValidationError(CredentialServiceError):
    """Credential input was rejected (422)."""

    error_kind: ErrorType = ErrorType.UNSUPPORTED_SHAPE

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=self.error_kind,
            status_code=422,
            details=details,
        )

    @property
    def field(self) -> str | None:
        field = self.details.get("field")
        return str(field) if field is not None else None


class MalformedJSONError(CredentialValidationError):
    """Input could not be parsed as JSON."""

    error_kind = ErrorType.MALFORMED_JSON


class MissingFieldError(CredentialValidationError):
    """A required field is absent or empty."""

    error_kind = ErrorType.MISSING_FIELD

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Missing required field: {field}",
            details={"field": field},
        )


class InvalidFieldError(CredentialValidationError):
    """A field is present but holds an unusable value."""

    error_kind = ErrorType.INVALID_FIELD

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={"field": field})


class UnsupportedShapeError(CredentialValidationError):
    """JSON parsed but matches none of the supported credential shapes."""

    error_kind = ErrorType.UNSUPPORTED_SHAPE


class OversizedPayloadError(CredentialValidationError):
    """Uploaded file exceeds the configured size limit."""

    error_kind = ErrorType.OVERSIZED_PAYLOAD

    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(
            f"File is larger than the maximum allowed size of {max_bytes} bytes.",
            details={"size": size, "max_bytes": max_bytes},
        )


class InvalidUploadError(CredentialValidationError):
    """Uploaded file does not look like a JSON credentials file."""

    error_kind = ErrorType.INVALID_UPLOAD


# ============================================================================
# Storage & Configuration Errors
# ============================================================================


class CredentialsStorageError(CredentialServiceError):
    """Error occurred during credentials storage operations."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.STORAGE_IO_FAILURE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"path": path} if path else None,
        )


class ConfigValidationError(CredentialServiceError):
    """Configuration validation error."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.CONFIGURATION,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


__all__ = [
    # Enums
    "ErrorType",
    # Base
    "CredentialServiceError",
    # Validation
    "CredentialValidationError",
    "MalformedJSONError",
    "MissingFieldError",
    "InvalidFieldError",
    "UnsupportedShapeError",
    "OversizedPayloadError",
    "InvalidUploadError",
    # Storage & configuration
    "CredentialsStorageError",
    "ConfigValidationError",
]
