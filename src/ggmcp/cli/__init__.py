"""Command-line interface."""

from ggmcp.cli.app import app

__all__ = ["app"]
