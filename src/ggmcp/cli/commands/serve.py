"""Server command for running the MCP listener."""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from ggmcp.cli.console import error

if TYPE_CHECKING:
    from ggmcp.server import ServerRunner

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        port: Annotated[
            int | None,
            typer.Option(
                "--port",
                "-p",
                help="Bind exactly this port instead of scanning the range",
            ),
        ] = None,
        debug: Annotated[
            bool,
            typer.Option(
                "--debug",
                help="Enable debug logging",
            ),
        ] = False,
        project: Annotated[
            Path | None,
            typer.Option(
                "--project",
                help="Project directory exposed to tools (default: cwd)",
            ),
        ] = None,
    ) -> None:
        """Start the MCP server."""
        from ggmcp.server import PortBindError, PortUnavailableError

        runner = _build_runner(config, port, debug, project)
        try:
            asyncio.run(runner.run())
        except (PortUnavailableError, PortBindError) as e:
            logger.error("server_start_failed", extra={"error": str(e)})
            error(str(e))
            raise typer.Exit(1) from None
        except KeyboardInterrupt:
            # Use print here since the handlers may already be closed
            print("\nServer stopped")


def _build_runner(
    config_path: Path | None,
    port: int | None,
    debug: bool,
    project: Path | None,
) -> "ServerRunner":
    """Load configuration and wire the app, exiting on configuration errors."""
    import tomllib

    from pydantic import ValidationError

    from ggmcp.config import ConfigError, GgmcpConfig, load_config
    from ggmcp.logging import configure_logging
    from ggmcp.server import ServerRunner, create_app
    from ggmcp.tools import HeadlessEditorHost, create_default_registry

    try:
        ggmcp_config = load_config(config_path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from None

    # Overrides go through validation like file values do
    data = ggmcp_config.model_dump()
    if port is not None:
        data["server"]["port"] = port
    if debug:
        data["logging"]["debug"] = True
    if project is not None:
        data["project"]["root"] = project
    try:
        ggmcp_config = GgmcpConfig.model_validate(data)
    except ValidationError as e:
        error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from None

    configure_logging(
        use_rich=True,
        log_to_file=ggmcp_config.logging.log_to_file,
        debug=ggmcp_config.logging.debug,
        retention_days=ggmcp_config.logging.retention_days,
    )

    try:
        project_root = ggmcp_config.resolve_project_root()
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1) from None

    editor_host = HeadlessEditorHost()
    registry = create_default_registry(project_root, editor_host)
    logger.debug(f"Tools: {', '.join(registry.names)}")

    app = create_app(
        ggmcp_config, registry, project_root=project_root, editor_host=editor_host
    )
    return ServerRunner.from_config(app, ggmcp_config)
