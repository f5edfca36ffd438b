"""Shared helpers for CLI commands: option aliases, value parsing, signals."""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Sequence
from typing import Annotated

import typer

from iwait.config.manager import ConfigManager
from iwait.config.models import BasicAuthCredentials
from iwait.models.resource import ResourceDescriptor

# Shared Typer option type aliases
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format: table, json, yaml"),
]
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Stored defaults profile"),
]


def get_manager() -> ConfigManager:
    return ConfigManager()


def parse_headers(values: Sequence[str] | None) -> dict[str, str] | None:
    """Parse repeated ``Name: value`` header options."""
    if not values:
        return None
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value', got '{raw}'")
        headers[name.strip()] = value.strip()
    return headers


def parse_basic_auth(value: str | None) -> BasicAuthCredentials | None:
    """Parse ``user:password`` into credentials."""
    if value is None:
        return None
    username, _, password = value.partition(":")
    if not username:
        raise typer.BadParameter("Basic auth must look like 'user:password'")
    return BasicAuthCredentials(username=username, password=password)


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, event: asyncio.Event,
) -> list[signal.Signals]:
    """Set ``event`` on SIGINT/SIGTERM. Returns the signals actually hooked."""
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, event.set)
        except (NotImplementedError, RuntimeError, ValueError):
            continue
        installed.append(sig)
    return installed


def descriptor_details(descriptor: ResourceDescriptor) -> str:
    """Short human summary of the parse products beyond the URI."""
    parts = []
    if descriptor.host is not None:
        parts.append(f"host={descriptor.host}")
    if descriptor.port is not None:
        parts.append(f"port={descriptor.port}")
    if descriptor.method is not None:
        parts.append(f"method={descriptor.method}")
    if descriptor.socket_path is not None:
        parts.append(f"socket={descriptor.socket_path}")
    return " ".join(parts)
