"""Status evaluation for stored credentials."""

import math
from datetime import UTC, datetime

from agent_credentials.models.credentials import (
    AuthMethod,
    CredentialRecord,
    Provider,
)
from agent_credentials.models.status import NOT_AUTHENTICATED_MESSAGE, StatusSnapshot


SECONDS_PER_DAY = 86400

DEFAULT_PREVIEW_PREFIX = 4
DEFAULT_PREVIEW_SUFFIX = 3


def mask_secret(
    secret: str,
    prefix: int = DEFAULT_PREVIEW_PREFIX,
    suffix: int = DEFAULT_PREVIEW_SUFFIX,
) -> str:
    """Mask the middle of a secret for display.

    Args:
        secret: Secret value to mask
        prefix: Number of leading characters to keep
        suffix: Number of trailing characters to keep

    Returns:
        ``"sk-a...123"`` style preview. Secrets too short to hide anything
        behind the ellipsis are fully starred.

    """
    if len(secret) <= prefix + suffix:
        return "*" * len(secret)
    tail = secret[-suffix:] if suffix else ""
    return f"{secret[:prefix]}...{tail}"


def days_until(expires_at: datetime, now: datetime) -> int:
    """Whole days left before ``expires_at``, rounded up."""
    remaining = (expires_at - now).total_seconds()
    return math.ceil(remaining / SECONDS_PER_DAY)


def evaluate_status(
    provider: Provider,
    record: CredentialRecord | None,
    *,
    location: str | None = None,
    now: datetime | None = None,
    preview_prefix: int = DEFAULT_PREVIEW_PREFIX,
    preview_suffix: int = DEFAULT_PREVIEW_SUFFIX,
) -> StatusSnapshot:
    """Derive a status snapshot from a loaded record.

    A present record is always reported as authenticated, expired or not.
    Whether the upstream provider still accepts the tokens is left to the
    CLI that uses them.
    """
    if record is None:
        return StatusSnapshot(
            provider=provider,
            authenticated=False,
            message=NOT_AUTHENTICATED_MESSAGE,
            location=location,
        )

    if record.auth_method is AuthMethod.API_KEY:
        return StatusSnapshot(
            provider=provider,
            authenticated=True,
            auth_method=record.auth_method,
            key_preview=mask_secret(record.api_key or "", preview_prefix, preview_suffix),
            location=location,
        )

    now = now or datetime.now(UTC)
    days_left = None
    expired = False
    if record.expires_at is not None:
        days_left = days_until(record.expires_at, now)
        expired = record.expires_at <= now

    return StatusSnapshot(
        provider=provider,
        authenticated=True,
        auth_method=record.auth_method,
        expires_at=record.expires_at,
        days_until_expiry=days_left,
        expired=expired,
        scopes=list(record.scopes),
        subscription_type=record.subscription_type,
        location=location,
    )
