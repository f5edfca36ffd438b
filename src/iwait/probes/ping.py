"""ICMP probe via the system ``ping`` binary."""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from contextlib import suppress

from iwait.config.constants import PING_PROCESS_TIMEOUT, PING_REPLY_WAIT

logger = logging.getLogger(__name__)


def ping_command(host: str, platform: str = sys.platform) -> list[str]:
    """Build a single-echo ping command for the current platform."""
    if platform == "win32":
        return ["ping", "-n", "1", "-w", str(PING_REPLY_WAIT * 1000), host]
    return ["ping", "-c", "1", "-W", str(PING_REPLY_WAIT), host]


async def check_ping(host: str, *, verbose: bool = False) -> bool:
    """Return True if ``host`` answers one echo request."""
    if host.startswith("-"):
        if verbose:
            logger.debug("Refusing to ping option-like host %r", host)
        return False

    cmd = ping_command(host)
    if verbose:
        logger.debug("Executing ping command: %s", " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        if verbose:
            logger.debug("Cannot run ping for %s: %s", host, exc)
        return False

    try:
        returncode = await asyncio.wait_for(proc.wait(), PING_PROCESS_TIMEOUT)
    except asyncio.TimeoutError:
        if verbose:
            logger.debug("Ping to %s did not finish in %ss", host, PING_PROCESS_TIMEOUT)
        return False
    finally:
        if proc.returncode is None:
            with suppress(ProcessLookupError):
                proc.kill()
                await proc.wait()

    if verbose:
        logger.debug("Ping to %s exited with %d", host, returncode)
    return returncode == 0
