"""Root Typer app: global options and command registration."""

from __future__ import annotations

from typing import Optional

import typer

from iwait import __version__
from iwait.commands import config_cmd, wait_cmd

app = typer.Typer(
    name="iwait",
    help="Wait for files, ports, sockets, hosts, and HTTP endpoints to become ready.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"iwait {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """iwait: gate startup on upstream dependencies."""


# Register commands
app.command("on")(wait_cmd.on)
app.command("parse")(wait_cmd.parse)
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    app()
