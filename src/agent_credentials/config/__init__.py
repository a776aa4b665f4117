"""Configuration module for the credential service."""

from agent_credentials.exceptions import ConfigValidationError

from .server import ServerSettings
from .settings import Settings, get_settings
from .storage import CredentialStorageSettings


__all__ = [
    "Settings",
    "get_settings",
    "ServerSettings",
    "CredentialStorageSettings",
    "ConfigValidationError",
]
