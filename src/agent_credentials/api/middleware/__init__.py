"""API middleware."""

from agent_credentials.api.middleware.errors import setup_error_handlers


__all__ = ["setup_error_handlers"]
