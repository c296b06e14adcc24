"""HTTP server for ggmcp."""

from ggmcp.server.app import GgmcpServer, create_app
from ggmcp.server.ports import PortRange, PortUnavailableError, find_available_port
from ggmcp.server.runner import PortBindError, ServerRunner

__all__ = [
    "GgmcpServer",
    "PortBindError",
    "PortRange",
    "PortUnavailableError",
    "ServerRunner",
    "create_app",
    "find_available_port",
]
