"""FastAPI application for the ggmcp server."""

import logging
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ggmcp.rpc.envelope import legacy_error
from ggmcp.rpc.handler import SERVER_VERSION, ProtocolHandler
from ggmcp.server.routes import health, mcp
from ggmcp.tools import HeadlessEditorHost, create_default_registry
from ggmcp.tools.executor import ToolExecutor

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from ggmcp.config import GgmcpConfig
    from ggmcp.tools.builtin.editor import EditorHost
    from ggmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def origin_pattern(allowed_origins: list[str]) -> re.Pattern[str] | None:
    """Compile origin patterns (``*`` matches anything) into one regex.

    Returns None when the list is empty, meaning every origin is allowed.
    """
    if not allowed_origins:
        return None
    alternatives = (re.escape(o).replace(r"\*", ".*") for o in allowed_origins)
    return re.compile("|".join(f"(?:{a})" for a in alternatives))


def is_origin_allowed(origin: str | None, pattern: re.Pattern[str] | None) -> bool:
    """Requests without an Origin header are never browser cross-site calls."""
    if origin is None or pattern is None:
        return True
    return pattern.fullmatch(origin) is not None


class GgmcpServer:
    """Main server application.

    Owns the FastAPI app; all requests beyond the health routes are passed
    to the ProtocolHandler. Without a registry, the built-in tools are
    registered against the same editor host the status endpoint reports.
    """

    def __init__(
        self,
        config: "GgmcpConfig",
        registry: "ToolRegistry | None",
        project_root: Path,
        editor_host: "EditorHost | None" = None,
    ):
        editor_host = editor_host or HeadlessEditorHost()
        if registry is None:
            registry = create_default_registry(project_root, editor_host)
        self._config = config
        self._registry = registry
        self._handler = ProtocolHandler(
            ToolExecutor(registry), project_root, editor_host
        )
        self._origin_pattern = origin_pattern(config.server.allowed_origins)
        self._app = self._create_app()

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application."""
        return self._app

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI app."""

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> "AsyncIterator[None]":
            logger.info("server_starting", extra={"tools": len(self._registry)})
            yield
            logger.info("server_stopped")

        app = FastAPI(
            title="ggmcp",
            description="Model Context Protocol bridge for editor tools",
            version=SERVER_VERSION,
            lifespan=lifespan,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

        app.state.server = self
        app.state.registry = self._registry
        app.state.handler = self._handler

        pattern = self._origin_pattern

        @app.middleware("http")
        async def check_origin(request: Request, call_next):
            origin = request.headers.get("origin")
            if not is_origin_allowed(origin, pattern):
                logger.warning("origin_rejected", extra={"http.origin": origin})
                return JSONResponse(
                    legacy_error(f"Origin not allowed: {origin}"), status_code=403
                )
            return await call_next(request)

        cors_options: dict = {
            "allow_methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["*"],
        }
        if pattern is None:
            cors_options["allow_origins"] = ["*"]
        else:
            cors_options["allow_origin_regex"] = pattern.pattern
        app.add_middleware(CORSMiddleware, **cors_options)

        # Health routes must be registered before the catch-all
        app.include_router(health.router, tags=["health"])
        app.include_router(mcp.router)

        return app


def create_app(
    config: "GgmcpConfig",
    registry: "ToolRegistry | None" = None,
    project_root: Path | None = None,
    editor_host: "EditorHost | None" = None,
) -> FastAPI:
    """Create the FastAPI application."""
    server = GgmcpServer(
        config=config,
        registry=registry,
        project_root=project_root or config.resolve_project_root(),
        editor_host=editor_host,
    )
    return server.app
