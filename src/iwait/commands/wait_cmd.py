"""Wait commands: block on resources, inspect how identifiers parse."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer

from iwait.api import wait
from iwait.commands._common import (
    FormatOpt,
    ProfileOpt,
    descriptor_details,
    get_manager,
    install_signal_handlers,
    parse_basic_auth,
    parse_headers,
)
from iwait.config.models import Strategy, WaitConfig
from iwait.errors import WaitTimeoutError, error_handler
from iwait.logging_setup import setup_logging
from iwait.models.result import WaitResult
from iwait.output.formatter import output
from iwait.parser import parse_resources


ResourcesArg = Annotated[
    list[str],
    typer.Argument(help="Resources, e.g. tcp:db:5432 http://svc/health ./out.log"),
]


async def _run(config: WaitConfig) -> WaitResult:
    loop = asyncio.get_running_loop()
    hooked = []
    if config.cancellation_signal is not None:
        hooked = install_signal_handlers(loop, config.cancellation_signal)
    try:
        return await wait(config)
    finally:
        for sig in hooked:
            loop.remove_signal_handler(sig)


@error_handler
def on(
    resources: ResourcesArg,
    delay: Annotated[int | None, typer.Option("--delay", "-d", help="Milliseconds before the first check")] = None,
    interval: Annotated[int | None, typer.Option("--interval", "-i", help="Milliseconds between checks")] = None,
    timeout: Annotated[int | None, typer.Option("--timeout", "-t", help="Milliseconds before giving up")] = None,
    strategy: Annotated[Strategy | None, typer.Option("--strategy", case_sensitive=False, help="Completion strategy")] = None,
    threshold: Annotated[int | None, typer.Option("--threshold", help="Ready count for the threshold strategy")] = None,
    reverse: Annotated[bool, typer.Option("--reverse", "-r", help="Wait for resources to become unavailable")] = False,
    window: Annotated[int | None, typer.Option("--window", "-w", help="File size stabilization window (ms)")] = None,
    simultaneous: Annotated[int | None, typer.Option("--simultaneous", "-s", help="Max probes in flight per round")] = None,
    http_timeout: Annotated[int | None, typer.Option("--http-timeout", help="HTTP request timeout (ms)")] = None,
    tcp_timeout: Annotated[int | None, typer.Option("--tcp-timeout", help="TCP/socket connect timeout (ms)")] = None,
    header: Annotated[list[str] | None, typer.Option("--header", "-H", help="Extra HTTP header 'Name: value'")] = None,
    no_follow_redirect: Annotated[bool, typer.Option("--no-follow-redirect", help="Treat redirects as final responses")] = False,
    basic_auth: Annotated[str | None, typer.Option("--basic-auth", help="HTTP basic auth 'user:password'")] = None,
    http2: Annotated[bool, typer.Option("--http2", help="Negotiate HTTP/2")] = False,
    allow_empty_dir: Annotated[bool, typer.Option("--allow-empty-dir", help="Empty directories count as ready")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug output from every probe")] = False,
    log: Annotated[bool, typer.Option("--log", "-l", help="Log progress after each round")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Print nothing on success")] = False,
    profile: ProfileOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Wait until resources are ready. Exits 0 on success, 3 on timeout, 4 on abort."""
    setup_logging(verbose=verbose, log=log)
    overrides = {
        "delay": delay,
        "interval": interval,
        "timeout": timeout,
        "strategy": strategy,
        "threshold": threshold,
        "reverse": True if reverse else None,
        "window": window,
        "simultaneous": simultaneous,
        "http_timeout": http_timeout,
        "tcp_timeout": tcp_timeout,
        "headers": parse_headers(header),
        "basic_auth": parse_basic_auth(basic_auth),
        "follow_redirect": False if no_follow_redirect else None,
        "http2": True if http2 else None,
        "dir_not_empty": False if allow_empty_dir else None,
        "verbose": True if verbose else None,
        "log": True if log else None,
        "cancellation_signal": asyncio.Event(),
    }
    config = get_manager().resolve(resources, profile_name=profile, overrides=overrides)

    try:
        result = asyncio.run(_run(config))
    except WaitTimeoutError as exc:
        if exc.result is not None and not quiet:
            output(exc.result, fmt, title="Resources")
        raise
    if not quiet:
        output(result, fmt, title="Resources")


@error_handler
def parse(
    resources: ResourcesArg,
    fmt: FormatOpt = "table",
) -> None:
    """Show how resource identifiers are interpreted."""
    descriptors = parse_resources(resources)
    rows = [
        [d.original_uri, d.type.value, d.uri, descriptor_details(d)]
        for d in descriptors
    ]
    output(
        descriptors,
        fmt,
        columns=["Resource", "Type", "Target", "Details"],
        rows=rows,
        title="Resources",
    )
