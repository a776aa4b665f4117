"""Data models for credential records and status snapshots."""

from agent_credentials.models.credentials import (
    API_KEY_PREFIX,
    AuthMethod,
    CredentialRecord,
    Provider,
)
from agent_credentials.models.status import (
    NOT_AUTHENTICATED_MESSAGE,
    OperationResult,
    StatusSnapshot,
)


__all__ = [
    "API_KEY_PREFIX",
    "NOT_AUTHENTICATED_MESSAGE",
    "AuthMethod",
    "CredentialRecord",
    "OperationResult",
    "Provider",
    "StatusSnapshot",
]
