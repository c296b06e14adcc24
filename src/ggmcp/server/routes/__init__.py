"""Server routes."""

from ggmcp.server.routes import health, mcp

__all__ = ["health", "mcp"]
