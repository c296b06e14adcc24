"""Centralized path management for ggmcp.

All state (config, logs) lives under a single base directory which can be
overridden with the GGMCP_HOME environment variable.

Default locations:
- Linux/macOS: ~/.ggmcp
- Windows: %USERPROFILE%\\.ggmcp
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "GGMCP_HOME"


@lru_cache(maxsize=1)
def get_ggmcp_home() -> Path:
    """Get the base directory for all ggmcp data.

    Resolution order:
    1. GGMCP_HOME environment variable (if set)
    2. Platform default (~/.ggmcp)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".ggmcp"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_ggmcp_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the JSONL logs directory."""
    return get_ggmcp_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for display."""
    return {
        "home": get_ggmcp_home(),
        "config": get_config_path(),
        "logs": get_logs_path(),
    }
