"""Tool listing command."""

from pathlib import Path
from typing import Annotated

import typer

from ggmcp.cli.console import console, create_table, dim


def register(app: typer.Typer) -> None:
    """Register the tools command."""

    @app.command()
    def tools(
        project: Annotated[
            Path | None,
            typer.Option(
                "--project",
                help="Project directory exposed to tools (default: cwd)",
            ),
        ] = None,
    ) -> None:
        """List the tools the server exposes."""
        from ggmcp.tools import create_default_registry

        root = (project or Path.cwd()).expanduser().resolve()
        registry = create_default_registry(root)

        table = create_table(
            f"Tools ({len(registry)})",
            [
                ("Name", {"style": "cyan", "no_wrap": True}),
                ("Parameters", "green"),
                ("Description", {"style": "white", "overflow": "fold"}),
            ],
        )
        for tool in registry:
            params = ", ".join(tool.input_schema.get("properties", {})) or "-"
            table.add_row(tool.name, params, tool.description)

        console.print(table)
        dim(f"Project root: {root}")
