"""Configuration module."""

from ggmcp.config.loader import get_default_config, load_config
from ggmcp.config.models import (
    ConfigError,
    GgmcpConfig,
    LoggingConfig,
    PortRangeConfig,
    ProjectConfig,
    ServerConfig,
)
from ggmcp.config.paths import get_config_path, get_ggmcp_home, get_logs_path

__all__ = [
    "ConfigError",
    "GgmcpConfig",
    "LoggingConfig",
    "PortRangeConfig",
    "ProjectConfig",
    "ServerConfig",
    "get_config_path",
    "get_default_config",
    "get_ggmcp_home",
    "get_logs_path",
    "load_config",
]
