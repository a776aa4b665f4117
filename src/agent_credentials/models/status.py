"""Display-ready models returned to the HTTP and CLI layers."""

from datetime import datetime

from pydantic import BaseModel, Field

from agent_credentials.exceptions import ErrorType
from agent_credentials.models.credentials import AuthMethod, Provider


NOT_AUTHENTICATED_MESSAGE = "Not authenticated"


class StatusSnapshot(BaseModel):
    """Derived summary of a provider's credential state.

    ``authenticated`` means "credentials are configured", not "the upstream
    provider currently accepts them".
    """

    provider: Provider
    authenticated: bool
    auth_method: AuthMethod | None = None
    key_preview: str | None = Field(
        default=None, description="Masked API key, never the full secret"
    )
    expires_at: datetime | None = None
    days_until_expiry: int | None = Field(
        default=None, description="Ceiling of days left; zero or negative if past"
    )
    expired: bool = False
    scopes: list[str] = Field(default_factory=list)
    subscription_type: str | None = None
    message: str | None = None
    location: str | None = None


class OperationResult(BaseModel):
    """Outcome of an upload or logout request."""

    success: bool
    message: str
    error_kind: ErrorType | None = None
    field: str | None = None
    status: StatusSnapshot | None = None
