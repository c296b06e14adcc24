"""Runtime server orchestration: port allocation, binding and serving."""

from __future__ import annotations

import asyncio
import logging
import os
import signal as signal_module
import socket
from typing import TYPE_CHECKING

import uvicorn

from ggmcp.server.ports import (
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    PortRange,
    PortUnavailableError,
    find_available_port,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

    from ggmcp.config import GgmcpConfig

logger = logging.getLogger(__name__)


class PortBindError(Exception):
    """The allocated port could not be bound."""


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a listening-ready TCP socket.

    Raises:
        PortBindError: If the port was taken between probe and bind, or
            is not a valid port number.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except (OSError, OverflowError) as e:
        sock.close()
        raise PortBindError(f"Failed to bind {host}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


class ServerRunner:
    """Owns port selection and the uvicorn serving lifecycle.

    A fixed ``port`` skips range scanning. Either way, the port is chosen
    exactly once; a failed bind is fatal rather than retried.
    """

    def __init__(
        self,
        app: FastAPI,
        *,
        host: str = "127.0.0.1",
        port: int | None = None,
        port_range: PortRange | None = None,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        log_level: str = "info",
    ) -> None:
        self._app = app
        self._host = host
        self._fixed_port = port
        self._port_range = port_range or PortRange(9960, 9990)
        self._probe_timeout = probe_timeout
        self._log_level = log_level.lower()
        self._port: int | None = None

    @classmethod
    def from_config(cls, app: FastAPI, config: GgmcpConfig) -> ServerRunner:
        server = config.server
        return cls(
            app,
            host=server.host,
            port=server.port,
            port_range=PortRange(server.port_range.start, server.port_range.end),
            probe_timeout=server.probe_timeout,
            log_level=config.log_level,
        )

    @property
    def port(self) -> int | None:
        """The bound port, once the server has started."""
        return self._port

    @property
    def url(self) -> str | None:
        if self._port is None:
            return None
        return f"http://{self._host}:{self._port}"

    def allocate_port(self) -> int:
        """Choose the port to bind.

        Raises:
            PortUnavailableError: If no port in the range is free.
        """
        if self._fixed_port is not None:
            logger.info("port_selected", extra={"port": self._fixed_port, "fixed": True})
            return self._fixed_port

        port = find_available_port(
            self._port_range, timeout=self._probe_timeout, host=self._host
        )
        if port is None:
            raise PortUnavailableError(
                f"No available port in range {self._port_range}"
            )
        logger.info("port_selected", extra={"port": port, "fixed": False})
        return port

    def listen(self) -> socket.socket:
        """Allocate a port and bind it."""
        port = self.allocate_port()
        sock = bind_socket(self._host, port)
        # Port 0 lets the OS pick; report what was actually bound
        self._port = sock.getsockname()[1]
        return sock

    async def run(self) -> None:
        """Bind and serve until a shutdown signal arrives."""
        sock = self.listen()

        uvicorn_config = uvicorn.Config(
            self._app,
            log_level=self._log_level,
            log_config=None,  # Use shared logging config, not uvicorn's
        )
        server = uvicorn.Server(uvicorn_config)

        loop = asyncio.get_running_loop()
        shutdown_count = 0

        def handle_signal() -> None:
            nonlocal shutdown_count
            shutdown_count += 1

            if shutdown_count == 1:
                logger.info("server_shutting_down")
                server.should_exit = True
            else:
                logger.warning("server_force_shutdown")
                os._exit(1)

        for sig in (signal_module.SIGTERM, signal_module.SIGINT):
            loop.add_signal_handler(sig, handle_signal)

        logger.info("server_listening", extra={"url": self.url})
        try:
            await server.serve(sockets=[sock])
        finally:
            sock.close()
            self._port = None
