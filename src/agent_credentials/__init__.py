"""Agent Credentials - credential lifecycle for the Claude Code and Codex CLIs."""

from ._version import __version__


__all__ = ["__version__"]
