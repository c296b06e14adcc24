"""Configuration models using Pydantic."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

MAX_PORT = 65535

# Range shared by every editor instance on the machine
DEFAULT_PORT_START = 9960
DEFAULT_PORT_END = 9990


class ConfigError(Exception):
    """Configuration error."""

    pass


class PortRangeConfig(BaseModel):
    """Inclusive range of ports the listener may claim."""

    start: int = Field(default=DEFAULT_PORT_START, ge=0, le=MAX_PORT)
    end: int = Field(default=DEFAULT_PORT_END, ge=0, le=MAX_PORT)

    @model_validator(mode="after")
    def _validate_order(self) -> "PortRangeConfig":
        if self.start > self.end:
            raise ValueError(
                f"port_range.start ({self.start}) must not exceed "
                f"port_range.end ({self.end})"
            )
        return self


class ServerConfig(BaseModel):
    """Configuration for the HTTP listener.

    When ``port`` is set it overrides range scanning entirely; the
    listener binds exactly that port or fails.
    """

    host: str = "127.0.0.1"
    port: int | None = Field(default=None, ge=0, le=MAX_PORT)
    port_range: PortRangeConfig = Field(default_factory=PortRangeConfig)
    # Seconds allowed for each candidate port probe
    probe_timeout: float = Field(default=1.0, gt=0)
    # Origin patterns accepted from browsers; "*" wildcards allowed, empty = any
    allowed_origins: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    debug: bool = False
    log_to_file: bool = False
    retention_days: int = Field(default=7, ge=1)


class ProjectConfig(BaseModel):
    """The project directory exposed to the built-in tools."""

    root: Path = Field(default_factory=Path.cwd)


class GgmcpConfig(BaseModel):
    """Root configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.logging.debug else "INFO"

    def resolve_project_root(self) -> Path:
        """Get the absolute project root.

        Raises:
            ConfigError: If the root is not an existing directory.
        """
        root = self.project.root.expanduser().resolve()
        if not root.is_dir():
            raise ConfigError(f"Project root is not a directory: {root}")
        return root
