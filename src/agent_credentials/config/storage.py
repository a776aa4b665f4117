"""Credential storage configuration settings."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from agent_credentials.models.credentials import Provider


DEFAULT_HOME = Path("/home/appuser")


def _default_home() -> Path:
    # The CLIs resolve their config relative to the HOME of the process that runs them
    home = os.environ.get("HOME")
    return Path(home) if home else DEFAULT_HOME


class CredentialStorageSettings(BaseModel):
    """Where each provider's canonical credential file lives."""

    home_dir: Path = Field(
        default_factory=_default_home,
        description="Home directory of the user the CLI processes run as",
    )

    claude_credentials_file: Path | None = Field(
        default=None,
        description="Claude Code credentials (defaults to <home>/.claude/.credentials.json)",
    )

    codex_credentials_file: Path | None = Field(
        default=None,
        description="Codex credentials (defaults to <home>/.codex/auth.json)",
    )

    max_upload_bytes: int = Field(
        default=10 * 1024,
        ge=256,
        le=1024 * 1024,
        description="Maximum size of an uploaded credentials file",
    )

    key_preview_prefix: int = Field(
        default=4, ge=0, le=12, description="Leading API key characters shown"
    )

    key_preview_suffix: int = Field(
        default=3, ge=0, le=12, description="Trailing API key characters shown"
    )

    @model_validator(mode="after")
    def resolve_credential_files(self) -> "CredentialStorageSettings":
        """Fill in per-provider paths relative to the home directory."""
        if self.claude_credentials_file is None:
            self.claude_credentials_file = self._default_file(Provider.CLAUDE)
        if self.codex_credentials_file is None:
            self.codex_credentials_file = self._default_file(Provider.CODEX)
        return self

    def _default_file(self, provider: Provider) -> Path:
        if provider is Provider.CLAUDE:
            return self.home_dir / ".claude" / ".credentials.json"
        return self.home_dir / ".codex" / "auth.json"

    def credentials_file(self, provider: Provider) -> Path:
        path = (
            self.claude_credentials_file
            if provider is Provider.CLAUDE
            else self.codex_credentials_file
        )
        return path if path is not None else self._default_file(provider)
