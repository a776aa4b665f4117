"""Credential record models shared by storage, normalization and status."""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

API_KEY_PREFIX = "sk-"


class Provider(StrEnum):
    """External CLI tools whose credentials are managed."""

    CLAUDE = "claude"
    CODEX = "codex"

    @property
    def display_name(self) -> str:
        return "Claude Code" if self is Provider.CLAUDE else "Codex"


class AuthMethod(StrEnum):
    """How a provider authenticates."""

    SUBSCRIPTION = "subscription"
    API_KEY = "api_key"


def datetime_from_millis(value: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=int(value))


def datetime_to_millis(value: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return (value - EPOCH) // _ONE_MS


def truncate_to_millis(value: datetime) -> datetime:
    """Normalize a datetime to UTC with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return datetime_from_millis(datetime_to_millis(value.astimezone(UTC)))


class CredentialRecord(BaseModel):
    """Canonical credential state for one provider.

    Exactly one auth method is populated. Secrets of the other method are
    always ``None`` so that switching methods never leaves stale material in
    the canonical file.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    auth_method: AuthMethod
    access_token: str | None = None
    refresh_token: str | None = None
    api_key: str | None = None
    expires_at: datetime | None = None
    scopes: list[str] = Field(default_factory=list)
    subscription_type: str | None = None
    id_token: str | None = None
    account_id: str | None = None
    last_refresh: str | None = None

    @model_validator(mode="after")
    def check_auth_method_fields(self) -> "CredentialRecord":
        if self.auth_method is AuthMethod.SUBSCRIPTION:
            if not self.access_token:
                raise ValueError("subscription credentials require an access token")
            if self.api_key is not None:
                raise ValueError("subscription credentials must not carry an API key")
        else:
            if self.provider is Provider.CLAUDE:
                raise ValueError("Claude credentials only support subscription auth")
            if not self.api_key or not self.api_key.startswith(API_KEY_PREFIX):
                raise ValueError(f"API key must start with '{API_KEY_PREFIX}'")
            leftovers = (
                self.access_token,
                self.refresh_token,
                self.expires_at,
                self.id_token,
                self.account_id,
                self.last_refresh,
            )
            if any(value is not None for value in leftovers) or self.scopes:
                raise ValueError("API key credentials must not carry OAuth fields")
        return self

    def to_canonical(self) -> dict[str, Any]:
        """Render the document the provider's CLI reads from disk."""
        expires_ms = (
            datetime_to_millis(self.expires_at) if self.expires_at is not None else None
        )

        if self.provider is Provider.CLAUDE:
            oauth: dict[str, Any] = {"accessToken": self.access_token}
            if self.refresh_token is not None:
                oauth["refreshToken"] = self.refresh_token
            if expires_ms is not None:
                oauth["expiresAt"] = expires_ms
            oauth["scopes"] = list(self.scopes)
            oauth["subscriptionType"] = self.subscription_type or "unknown"
            return {"claudeAiOauth": oauth}

        if self.auth_method is AuthMethod.API_KEY:
            return {"OPENAI_API_KEY": self.api_key}

        tokens: dict[str, Any] = {}
        if self.id_token is not None:
            tokens["id_token"] = self.id_token
        tokens["access_token"] = self.access_token
        if self.refresh_token is not None:
            tokens["refresh_token"] = self.refresh_token
        if self.account_id is not None:
            tokens["account_id"] = self.account_id
        document: dict[str, Any] = {"tokens": tokens}
        if expires_ms is not None:
            document["expiresAt"] = expires_ms
        if self.last_refresh is not None:
            document["last_refresh"] = self.last_refresh
        return document
