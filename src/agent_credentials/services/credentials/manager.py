"""Credentials manager - facade for one provider's credential lifecycle."""

from collections.abc import Callable
from datetime import datetime

from structlog import get_logger

from agent_credentials.config.storage import CredentialStorageSettings
from agent_credentials.core.normalizer import normalize, normalize_upload
from agent_credentials.exceptions import (
    CredentialsStorageError,
    CredentialValidationError,
)
from agent_credentials.models.credentials import CredentialRecord, Provider
from agent_credentials.models.status import OperationResult, StatusSnapshot
from agent_credentials.services.credentials.status import evaluate_status
from agent_credentials.storage import CredentialStore, JsonFileCredentialStore


logger = get_logger(__name__)


class CredentialsManager:
    """Upload, status and logout for a single provider.

    Client-input and storage errors are turned into failed
    ``OperationResult`` values; nothing raises to the caller.
    """

    def __init__(
        self,
        provider: Provider,
        store: CredentialStore,
        *,
        max_upload_bytes: int = 10 * 1024,
        preview_prefix: int = 4,
        preview_suffix: int = 3,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.max_upload_bytes = max_upload_bytes
        self.preview_prefix = preview_prefix
        self.preview_suffix = preview_suffix
        self._clock = clock

    @classmethod
    def from_settings(
        cls, provider: Provider, settings: CredentialStorageSettings
    ) -> "CredentialsManager":
        store = JsonFileCredentialStore(provider, settings.credentials_file(provider))
        return cls(
            provider,
            store,
            max_upload_bytes=settings.max_upload_bytes,
            preview_prefix=settings.key_preview_prefix,
            preview_suffix=settings.key_preview_suffix,
        )

    def get_status(self) -> StatusSnapshot:
        return evaluate_status(
            self.provider,
            self.store.load(),
            location=self.store.get_location(),
            now=self._clock() if self._clock else None,
            preview_prefix=self.preview_prefix,
            preview_suffix=self.preview_suffix,
        )

    def upload_file(self, content: bytes, filename: str | None) -> OperationResult:
        """Validate an uploaded credentials file and persist it."""
        try:
            record = normalize_upload(
                self.provider, content, filename, max_bytes=self.max_upload_bytes
            )
        except CredentialValidationError as e:
            return self._rejected(e, source="file")
        return self._persist(record, "Credentials uploaded successfully.", "file")

    def upload_json(self, text: str) -> OperationResult:
        """Validate pasted JSON and persist it."""
        try:
            record = normalize(self.provider, text)
        except CredentialValidationError as e:
            return self._rejected(e, source="json")
        return self._persist(record, "Credentials saved successfully.", "json")

    def logout(self) -> OperationResult:
        """Remove stored credentials. Succeeds when nothing is stored."""
        try:
            self.store.clear()
        except CredentialsStorageError as e:
            return OperationResult(
                success=False,
                message=e.message,
                error_kind=e.error_type,
            )
        return OperationResult(success=True, message="Logged out successfully.")

    def _persist(self, record: CredentialRecord, message: str, source: str) -> OperationResult:
        try:
            self.store.save(record)
        except CredentialsStorageError as e:
            return OperationResult(
                success=False,
                message=e.message,
                error_kind=e.error_type,
            )

        logger.info(
            "credentials_uploaded",
            provider=self.provider.value,
            auth_method=record.auth_method.value,
            source=source,
        )
        return OperationResult(success=True, message=message, status=self.get_status())

    def _rejected(self, error: CredentialValidationError, source: str) -> OperationResult:
        logger.info(
            "credentials_rejected",
            provider=self.provider.value,
            source=source,
            error_kind=error.error_type.value,
            field=error.field,
        )
        return OperationResult(
            success=False,
            message=error.message,
            error_kind=error.error_type,
            field=error.field,
        )
