"""Directory probe."""

from __future__ import annotations

import asyncio
import logging
import os

logger = logging.getLogger(__name__)


def _inspect(path: str, require_entries: bool) -> bool:
    if not os.path.isdir(path):
        return False
    if not require_entries:
        return True
    with os.scandir(path) as entries:
        return next(entries, None) is not None


async def check_dir(path: str, *, not_empty: bool = True, verbose: bool = False) -> bool:
    """Return True if ``path`` is a directory (with at least one entry when ``not_empty``)."""
    try:
        ready = await asyncio.to_thread(_inspect, path, not_empty)
    except OSError as exc:
        if verbose:
            logger.debug("Directory %s is not accessible: %s", path, exc)
        return False
    if verbose:
        logger.debug("Directory %s ready=%s", path, ready)
    return ready
