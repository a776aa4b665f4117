"""Settings configuration for the credential service."""

import os
import tomllib
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_credentials.config.discovery import find_toml_config_file
from agent_credentials.exceptions import ConfigValidationError

from .server import ServerSettings
from .storage import CredentialStorageSettings


__all__ = [
    "Settings",
    "get_settings",
]

logger = structlog.get_logger(__name__)


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None → default, dict → instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    return value


class Settings(BaseSettings):
    """
    Configuration settings for the credential service.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over .env file values.
    TOML configuration files are loaded in the following order:
    1. CONFIG_FILE environment variable
    2. .agent_credentials.toml / agent_credentials.toml in current directory
    3. config.toml in user config directory/agent_credentials/ (platform-specific)
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENT_CREDENTIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    storage: CredentialStorageSettings = Field(
        default_factory=CredentialStorageSettings,
        description="Credential file locations and upload limits",
    )

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: Any) -> Any:
        return _coerce_settings(v, ServerSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def validate_storage(cls, v: Any) -> Any:
        return _coerce_settings(v, CredentialStorageSettings)

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Args:
            toml_path: Path to the TOML configuration file

        Returns:
            dict: Configuration data from the TOML file

        Raises:
            ConfigValidationError: If the TOML file is invalid or cannot be read
        """
        if toml_path.suffix.lower() != ".toml":
            raise ConfigValidationError(
                f"Unsupported config file format: {toml_path.suffix}. "
                "Only TOML (.toml) files are supported."
            )
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigValidationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(
                f"Invalid TOML syntax in {toml_path}: {e}"
            ) from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Auto-discover config file or use CONFIG_FILE env var
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_toml_config(config_path)
            logger.debug("config_file_loaded", path=str(config_path))

        # kwargs take precedence over file values
        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Get a settings instance with configuration file support.

    Args:
        config_path: Optional path to configuration file. If None, uses CONFIG_FILE env var
                    or auto-discovers config file.

    Returns:
        Settings: Configured Settings instance
    """
    return Settings.from_config(config_path=config_path)
