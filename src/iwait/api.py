"""Public entry points."""

from __future__ import annotations

import asyncio
from typing import Any

from iwait.config.models import WaitConfig
from iwait.engine.scheduler import PollScheduler
from iwait.models.result import WaitResult
from iwait.parser import parse_resources
from iwait.probes import Prober, ResourceProber


async def wait(
    config: WaitConfig | None = None,
    /,
    *,
    prober: Prober | None = None,
    **options: Any,
) -> WaitResult:
    """Wait until the configured resources satisfy the strategy.

    Pass either a :class:`WaitConfig` or the options as keyword arguments::

        result = await wait(resources=["tcp:db:5432"], timeout=30_000)

    Raises:
        ParseError: A resource identifier is malformed (before any polling).
        WaitTimeoutError: ``timeout`` elapsed first. ``exc.result`` holds
            the state at that moment.
        AbortError: ``cancellation_signal`` was set.
    """
    if config is None:
        config = WaitConfig(**options)
    elif options:
        raise TypeError("Pass either a WaitConfig or keyword options, not both")

    # Duplicate identifiers share one state entry
    descriptors = parse_resources(dict.fromkeys(config.resources))

    if prober is not None:
        return await PollScheduler(config, descriptors, prober).run()
    async with ResourceProber(config) as default_prober:
        return await PollScheduler(config, descriptors, default_prober).run()


def wait_sync(config: WaitConfig | None = None, /, **options: Any) -> WaitResult:
    """Blocking variant of :func:`wait` for code without an event loop."""
    return asyncio.run(wait(config, **options))
