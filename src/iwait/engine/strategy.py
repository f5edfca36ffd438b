"""Completion strategies."""

from __future__ import annotations

from collections.abc import Collection

from iwait.config.models import Strategy
from iwait.models.state import ResourceState


def evaluate(
    states: Collection[ResourceState],
    strategy: Strategy,
    threshold: int | None = None,
) -> bool:
    """Return True if ``states`` satisfy ``strategy``.

    Completion and success coincide for every strategy. With no resources
    the wait is vacuously complete. ``threshold`` defaults to the number of
    resources, which makes an unconfigured threshold behave like ``all``.
    """
    total = len(states)
    if total == 0:
        return True
    ready = sum(1 for state in states if state.ready)
    match strategy:
        case Strategy.ALL:
            return ready == total
        case Strategy.ANY | Strategy.RACE:
            return ready > 0
        case Strategy.THRESHOLD:
            required = total if threshold is None else threshold
            return ready >= required
        case _:
            raise ValueError(f"Unknown strategy: {strategy}")
