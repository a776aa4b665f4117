"""Credential storage implementations."""

from agent_credentials.storage.base import CredentialStore
from agent_credentials.storage.json_file import JsonFileCredentialStore


__all__ = [
    "CredentialStore",
    "JsonFileCredentialStore",
]
