"""CLI command modules."""

from ggmcp.cli.commands import config, serve, tools

__all__ = [
    "config",
    "serve",
    "tools",
]
