"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from ggmcp.cli.console import console, create_table, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $GGMCP_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from ggmcp.config.paths import get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            _show(expanded_path)
        elif action == "validate":
            _validate(expanded_path)
        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)


def _show(config_path: Path) -> None:
    from rich.syntax import Syntax

    if not config_path.exists():
        error(f"Config file not found: {config_path}")
        console.print("Defaults are used when no config file exists")
        raise typer.Exit(1)

    content = config_path.read_text()
    syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
    console.print(f"[bold]Config file: {config_path}[/bold]\n")
    console.print(syntax)


def _validate(config_path: Path) -> None:
    import tomllib

    from pydantic import ValidationError

    from ggmcp.config import load_config

    if not config_path.exists():
        error(f"Config file not found: {config_path}")
        raise typer.Exit(1)

    try:
        config_obj = load_config(config_path)
    except tomllib.TOMLDecodeError as e:
        error(f"Invalid TOML: {e}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Configuration validation failed:")
        console.print()
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
        raise typer.Exit(1) from None

    server = config_obj.server
    table = create_table(
        "Configuration Summary", [("Setting", "cyan"), ("Value", "green")]
    )
    table.add_row("Host", server.host)
    if server.port is not None:
        table.add_row("Port", f"{server.port} (fixed)")
    else:
        table.add_row("Port range", f"{server.port_range.start}-{server.port_range.end}")
    table.add_row("Probe timeout", f"{server.probe_timeout}s")
    table.add_row(
        "Allowed origins",
        ", ".join(server.allowed_origins) or "[dim]any[/dim]",
    )
    table.add_row("Project root", str(config_obj.project.root))
    table.add_row("Debug", "on" if config_obj.logging.debug else "off")
    table.add_row("Log to file", "on" if config_obj.logging.log_to_file else "off")

    success("Configuration is valid!")
    console.print()
    console.print(table)
