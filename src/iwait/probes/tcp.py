"""TCP port probe."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

logger = logging.getLogger(__name__)


async def check_tcp(host: str, port: int, timeout: int, *, verbose: bool = False) -> bool:
    """Return True if a TCP connection to ``host:port`` opens within ``timeout`` ms."""
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout / 1000,
        )
    except asyncio.TimeoutError:
        if verbose:
            logger.debug("TCP connection to %s:%d timed out", host, port)
        return False
    except OSError as exc:
        if verbose:
            logger.debug("TCP connection to %s:%d failed: %s", host, port, exc)
        return False

    if verbose:
        logger.debug("TCP connection to %s:%d succeeded", host, port)
    writer.close()
    with suppress(OSError):
        await writer.wait_closed()
    return True
