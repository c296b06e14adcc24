"""Main CLI application."""

import typer

from ggmcp.cli.commands import config, serve, tools

app = typer.Typer(
    name="ggmcp",
    help="ggmcp - editor tools over MCP",
    no_args_is_help=True,
)

serve.register(app)
config.register(app)
tools.register(app)


if __name__ == "__main__":
    app()
