"""Unix domain socket probe."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

logger = logging.getLogger(__name__)


async def check_socket(path: str, timeout: int, *, verbose: bool = False) -> bool:
    """Return True if the Unix socket at ``path`` accepts a connection."""
    if not hasattr(asyncio, "open_unix_connection"):
        if verbose:
            logger.debug("Unix sockets are not supported on this platform")
        return False
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_unix_connection(path), timeout / 1000,
        )
    except asyncio.TimeoutError:
        if verbose:
            logger.debug("Socket connection to %s timed out", path)
        return False
    except OSError as exc:
        if verbose:
            logger.debug("Socket connection to %s failed: %s", path, exc)
        return False

    writer.close()
    with suppress(OSError):
        await writer.wait_closed()
    return True
