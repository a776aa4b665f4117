"""Provider-keyed entry point used by the HTTP and CLI layers."""

from collections.abc import Mapping

from agent_credentials.config.settings import Settings
from agent_credentials.models.credentials import Provider
from agent_credentials.models.status import OperationResult, StatusSnapshot
from agent_credentials.services.credentials.manager import CredentialsManager


class CredentialService:
    """One CredentialsManager per provider."""

    def __init__(self, managers: Mapping[Provider, CredentialsManager]) -> None:
        missing = set(Provider) - set(managers)
        if missing:
            names = ", ".join(sorted(p.value for p in missing))
            raise ValueError(f"No credentials manager configured for: {names}")
        self._managers = dict(managers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            {
                provider: CredentialsManager.from_settings(provider, settings.storage)
                for provider in Provider
            }
        )

    def manager(self, provider: Provider) -> CredentialsManager:
        return self._managers[provider]

    def get_status(self, provider: Provider) -> StatusSnapshot:
        return self.manager(provider).get_status()

    def upload_file(
        self, provider: Provider, content: bytes, filename: str | None
    ) -> OperationResult:
        return self.manager(provider).upload_file(content, filename)

    def upload_json(self, provider: Provider, text: str) -> OperationResult:
        return self.manager(provider).upload_json(text)

    def logout(self, provider: Provider) -> OperationResult:
        return self.manager(provider).logout()
