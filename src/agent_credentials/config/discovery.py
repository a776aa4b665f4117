from pathlib import Path

from agent_credentials.core.system import get_xdg_config_home


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for agent_credentials.

    Searches in the following order:
    1. .agent_credentials.toml in current directory
    2. agent_credentials.toml in current directory
    3. config.toml in user config directory/agent_credentials/ (platform-specific)
    """
    candidates = [
        Path(".agent_credentials.toml").resolve(),
        Path("agent_credentials.toml").resolve(),
        get_agent_credentials_config_dir() / "config.toml",
    ]

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None


def get_agent_credentials_config_dir() -> Path:
    """Get the agent_credentials configuration directory.

    Returns:
        Path to the configuration directory within user config directory.
    """
    return get_xdg_config_home() / "agent_credentials"
