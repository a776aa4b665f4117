"""Abstract base class for credential storage."""

from abc import ABC, abstractmethod

from agent_credentials.models.credentials import CredentialRecord, Provider


class CredentialStore(ABC):
    """Abstract interface for one provider's canonical credential storage."""

    provider: Provider

    @abstractmethod
    def load(self) -> CredentialRecord | None:
        """Load credentials from storage.

        Returns:
            Parsed record if found and valid, None otherwise

        """

    @abstractmethod
    def save(self, record: CredentialRecord) -> None:
        """Replace stored credentials with ``record``.

        Raises:
            CredentialsStorageError: If the write fails

        """

    @abstractmethod
    def clear(self) -> bool:
        """Delete credentials from storage.

        Returns:
            True if something was deleted, False if nothing was stored

        Raises:
            CredentialsStorageError: If the delete fails

        """

    @abstractmethod
    def exists(self) -> bool:
        """Check if credentials exist in storage."""

    @abstractmethod
    def get_location(self) -> str:
        """Get the storage location description.

        Returns:
            Human-readable description of where credentials are stored

        """
