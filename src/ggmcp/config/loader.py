"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from ggmcp.config.models import GgmcpConfig
from ggmcp.config.paths import get_config_path

logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes", "on")


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("ggmcp.toml"),  # Current directory
        get_config_path(),  # ~/.ggmcp/config.toml (or GGMCP_HOME)
        Path("/etc/ggmcp/config.toml"),  # System-wide
    ]


def _section(config: dict[str, Any], key: str) -> dict[str, Any]:
    """Get a config section, creating it if missing."""
    section = config.get(key)
    if not isinstance(section, dict):
        section = {}
        config[key] = section
    return section


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides on top of file values."""
    if port := os.environ.get("GGMCP_PORT"):
        _section(config, "server")["port"] = port

    if debug := os.environ.get("GGMCP_DEBUG"):
        _section(config, "logging")["debug"] = debug.strip().lower() in TRUTHY

    if root := os.environ.get("GGMCP_PROJECT_ROOT"):
        _section(config, "project")["root"] = root

    return config


def _find_config_file(path: Path | None) -> Path | None:
    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> GgmcpConfig:
    """Load configuration from a TOML file.

    Every setting has a default, so running without any config file is
    valid; environment overrides still apply in that case.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated GgmcpConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the config file is invalid.
    """
    config_path = _find_config_file(path)

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
        logger.debug(f"Loaded config from {config_path}")
    else:
        logger.debug("No config file found, using defaults")

    raw_config = _apply_env_overrides(raw_config)

    return GgmcpConfig.model_validate(raw_config)


def get_default_config() -> GgmcpConfig:
    """Get a default configuration for development/testing."""
    return GgmcpConfig()
