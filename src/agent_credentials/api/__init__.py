"""HTTP API for credential management."""

from agent_credentials.api.app import create_app


__all__ = ["create_app"]
