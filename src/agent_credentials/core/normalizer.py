"""Validation and normalization of uploaded credential material.

Raw input is parsed with orjson, then probed against the shapes each provider
accepts. Probing is an ordered sequence of checks that yields one variant of
``ParsedCredential``; the variant then builds the canonical ``CredentialRecord``.
Nothing here touches the filesystem.
"""

from datetime import UTC, datetime
from pathlib import PurePath
from typing import Annotated, Any, Literal

import orjson
from pydantic import BaseModel, Field

from agent_credentials.exceptions import (
    InvalidFieldError,
    InvalidUploadError,
    MalformedJSONError,
    MissingFieldError,
    OversizedPayloadError,
    UnsupportedShapeError,
)
from agent_credentials.models.credentials import (
    API_KEY_PREFIX,
    AuthMethod,
    CredentialRecord,
    Provider,
    datetime_from_millis,
    truncate_to_millis,
)


DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024

CLAUDE_OAUTH_KEY = "claudeAiOauth"
CODEX_API_KEY_FIELD = "OPENAI_API_KEY"
CODEX_TOKENS_KEY = "tokens"


# ============================================================================
# Parsed variants
# ============================================================================


class ClaudeOAuthInput(BaseModel):
    """``{"claudeAiOauth": {...}}`` as written by ``claude login``."""

    shape: Literal["claude_oauth"] = "claude_oauth"
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    scopes: list[str] = Field(default_factory=list)
    subscription_type: str = "unknown"

    def to_record(self) -> CredentialRecord:
        return CredentialRecord(
            provider=Provider.CLAUDE,
            auth_method=AuthMethod.SUBSCRIPTION,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=self.expires_at,
            scopes=self.scopes,
            subscription_type=self.subscription_type,
        )


class CodexApiKeyInput(BaseModel):
    """``{"OPENAI_API_KEY": "sk-..."}``."""

    shape: Literal["codex_api_key"] = "codex_api_key"
    api_key: str

    def to_record(self) -> CredentialRecord:
        return CredentialRecord(
            provider=Provider.CODEX,
            auth_method=AuthMethod.API_KEY,
            api_key=self.api_key,
        )


class CodexOAuthInput(BaseModel):
    """ChatGPT sign-in tokens, either nested under ``tokens`` or flat camelCase."""

    shape: Literal["codex_oauth"] = "codex_oauth"
    access_token: str
    refresh_token: str | None = None
    id_token: str | None = None
    account_id: str | None = None
    expires_at: datetime | None = None
    last_refresh: str | None = None

    def to_record(self) -> CredentialRecord:
        return CredentialRecord(
            provider=Provider.CODEX,
            auth_method=AuthMethod.SUBSCRIPTION,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            id_token=self.id_token,
            account_id=self.account_id,
            expires_at=self.expires_at,
            last_refresh=self.last_refresh,
        )


ParsedCredential = Annotated[
    ClaudeOAuthInput | CodexApiKeyInput | CodexOAuthInput,
    Field(discriminator="shape"),
]


# ============================================================================
# Field helpers
# ============================================================================


def _required_token(container: dict[str, Any], key: str, field: str) -> str:
    value = container.get(key)
    if value is None or value == "":
        raise MissingFieldError(field)
    if not isinstance(value, str):
        raise InvalidFieldError(field, f"Field '{field}' must be a string")
    return value


def _optional_string(container: dict[str, Any], key: str, field: str) -> str | None:
    value = container.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidFieldError(field, f"Field '{field}' must be a string")
    return value


def parse_expires_at(value: Any, field: str = "expiresAt") -> datetime | None:
    """Parse an expiry given as epoch milliseconds or an ISO-8601 string."""
    if value is None or value == "":
        return None
    # bool is an int subclass
    if isinstance(value, bool):
        raise InvalidFieldError(field, f"Field '{field}' must be a timestamp")
    if isinstance(value, int | float):
        try:
            return datetime_from_millis(value)
        except (OverflowError, ValueError) as e:
            raise InvalidFieldError(field, f"Field '{field}' is out of range") from e
    if isinstance(value, str):
        text = value.strip()
        digits = text.removeprefix("-")
        if digits.isascii() and digits.isdigit():
            try:
                millis = int(text)
            except ValueError as e:
                # longer than the interpreter's int conversion limit
                raise InvalidFieldError(
                    field, f"Field '{field}' is out of range"
                ) from e
            return parse_expires_at(millis, field)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidFieldError(
                field, f"Field '{field}' is not a valid ISO-8601 timestamp"
            ) from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        try:
            return truncate_to_millis(parsed)
        except (OverflowError, ValueError) as e:
            raise InvalidFieldError(field, f"Field '{field}' is out of range") from e
    raise InvalidFieldError(field, f"Field '{field}' must be a timestamp")


def _parse_scopes(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise InvalidFieldError("scopes", "Field 'scopes' must be a list of strings")
    return list(value)


# ============================================================================
# Shape probing
# ============================================================================


def _probe_claude(data: dict[str, Any]) -> ClaudeOAuthInput:
    oauth = data.get(CLAUDE_OAUTH_KEY)
    if not isinstance(oauth, dict):
        raise UnsupportedShapeError(
            "Invalid credentials structure. Expected claudeAiOauth with "
            "accessToken, refreshToken, etc."
        )

    return ClaudeOAuthInput(
        access_token=_required_token(oauth, "accessToken", "accessToken"),
        refresh_token=_optional_string(oauth, "refreshToken", "refreshToken"),
        expires_at=parse_expires_at(oauth.get("expiresAt")),
        scopes=_parse_scopes(oauth.get("scopes")),
        subscription_type=(
            _optional_string(oauth, "subscriptionType", "subscriptionType")
            or "unknown"
        ),
    )


def _probe_codex(data: dict[str, Any]) -> CodexApiKeyInput | CodexOAuthInput:
    # An explicit API key wins over any subscription fields alongside it.
    api_key = data.get(CODEX_API_KEY_FIELD)
    if api_key is not None and api_key != "":
        if not isinstance(api_key, str):
            raise InvalidFieldError(
                CODEX_API_KEY_FIELD, f"Field '{CODEX_API_KEY_FIELD}' must be a string"
            )
        api_key = api_key.strip()
        if not api_key.startswith(API_KEY_PREFIX) or len(api_key) <= len(
            API_KEY_PREFIX
        ):
            raise InvalidFieldError(
                CODEX_API_KEY_FIELD,
                f"API key must start with '{API_KEY_PREFIX}'",
            )
        return CodexApiKeyInput(api_key=api_key)

    tokens = data.get(CODEX_TOKENS_KEY)
    if isinstance(tokens, dict):
        expires_raw = data.get("expiresAt", data.get("expires_at"))
        if expires_raw is None:
            expires_raw = tokens.get("expires_at")
        return CodexOAuthInput(
            access_token=_required_token(tokens, "access_token", "accessToken"),
            refresh_token=_optional_string(tokens, "refresh_token", "refreshToken"),
            id_token=_optional_string(tokens, "id_token", "idToken"),
            account_id=_optional_string(tokens, "account_id", "accountId"),
            expires_at=parse_expires_at(expires_raw),
            last_refresh=_optional_string(data, "last_refresh", "last_refresh"),
        )

    if "accessToken" in data:
        return CodexOAuthInput(
            access_token=_required_token(data, "accessToken", "accessToken"),
            refresh_token=_optional_string(data, "refreshToken", "refreshToken"),
            expires_at=parse_expires_at(data.get("expiresAt")),
        )

    raise UnsupportedShapeError(
        "Invalid credentials structure. Expected OPENAI_API_KEY or OAuth tokens."
    )


def parse_credential(provider: Provider, data: Any) -> ParsedCredential:
    """Classify decoded JSON into the variant the provider supports."""
    if not isinstance(data, dict):
        raise UnsupportedShapeError("Credentials must be a JSON object.")
    if provider is Provider.CLAUDE:
        return _probe_claude(data)
    return _probe_codex(data)


# ============================================================================
# Public entry points
# ============================================================================


def decode_json(raw: bytes | str) -> Any:
    """Decode raw JSON input, mapping every failure to MalformedJSONError."""
    if not raw.strip():
        raise MalformedJSONError("JSON content is required.")

    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise MalformedJSONError(f"Invalid JSON: {e}") from e


def normalize(provider: Provider, raw: bytes | str) -> CredentialRecord:
    """Parse and validate pasted or uploaded input into a CredentialRecord.

    Args:
        provider: Provider the credentials belong to
        raw: Raw JSON as bytes or text

    Returns:
        Fully populated record ready for ``CredentialStore.save``

    Raises:
        CredentialValidationError: If the input is malformed or incomplete

    """
    data = decode_json(raw)
    return parse_credential(provider, data).to_record()


def normalize_upload(
    provider: Provider,
    content: bytes,
    filename: str | None,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> CredentialRecord:
    """Validate an uploaded file, then normalize it like pasted JSON.

    Size is checked before anything is parsed.
    """
    if len(content) > max_bytes:
        raise OversizedPayloadError(len(content), max_bytes)

    if not filename or PurePath(filename).suffix.lower() != ".json":
        raise InvalidUploadError(
            "Invalid file. Please upload a valid .json credentials file."
        )

    return normalize(provider, content)
