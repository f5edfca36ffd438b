"""Config commands: manage stored wait defaults."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.prompt import Confirm

from iwait.commands._common import FormatOpt, get_manager
from iwait.errors import error_handler
from iwait.output.formatter import output

app = typer.Typer(name="config", help="Manage stored default options and profiles.")
console = Console()

ProfileNameOpt = Annotated[
    str,
    typer.Option("--profile", "-p", help="Profile to modify"),
]


@app.command("list")
@error_handler
def list_profiles(fmt: FormatOpt = "table") -> None:
    """List all profiles of stored defaults."""
    mgr = get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No profiles configured. Run 'iwait config set KEY VALUE' to create one.[/]")
        return

    default = mgr.config.default_profile
    rows = [
        [name, ", ".join(sorted(p.options)) or "-", "*" if name == default else ""]
        for name, p in profiles.items()
    ]
    output(
        {"profiles": [p.model_dump() for p in profiles.values()]},
        fmt,
        columns=["Name", "Options", "Default"],
        rows=rows,
        title="Profiles",
    )


@app.command()
@error_handler
def show(
    name: Annotated[str | None, typer.Argument(help="Profile name (uses default if omitted)")] = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show the options stored in a profile."""
    mgr = get_manager()
    profile = mgr.get_profile(name)
    if not profile:
        console.print(f"[red]Profile '{name or 'default'}' not found.[/]")
        raise typer.Exit(1)

    data = dict(profile.options)
    if "basic_auth" in data:
        data["basic_auth"] = {**data["basic_auth"], "password": "***"}
    output(data, fmt, kv=True, title=f"Profile: {profile.name}")


@app.command("set")
@error_handler
def set_option(
    key: Annotated[str, typer.Argument(help="Option name, e.g. timeout or http-timeout")],
    value: Annotated[str, typer.Argument(help="Option value")],
    profile: ProfileNameOpt = "default",
) -> None:
    """Store a default option in a profile."""
    stored = get_manager().set_option(profile, key, value)
    console.print(f"[green]Set {key} = {stored} in profile '{profile}'.[/]")


@app.command()
@error_handler
def unset(
    key: Annotated[str, typer.Argument(help="Option name")],
    profile: ProfileNameOpt = "default",
) -> None:
    """Remove a stored option from a profile."""
    if get_manager().unset_option(profile, key):
        console.print(f"[green]Removed {key} from profile '{profile}'.[/]")
    else:
        console.print(f"[red]Option '{key}' is not set in profile '{profile}'.[/]")
        raise typer.Exit(1)


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Profile name to use by default")],
) -> None:
    """Set the default profile."""
    if get_manager().set_default(name):
        console.print(f"[green]Default profile set to '{name}'.[/]")
    else:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Profile name to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a profile."""
    mgr = get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Remove profile '{name}'?"):
            console.print("Cancelled.")
            return

    mgr.remove_profile(name)
    console.print(f"[green]Profile '{name}' removed.[/]")


@app.command()
def path() -> None:
    """Print the config file location."""
    console.print(str(get_manager().config_path))
