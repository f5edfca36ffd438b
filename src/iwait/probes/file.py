"""File probe: existence plus size stabilization."""

from __future__ import annotations

import asyncio
import glob
import logging
import os
import time
from typing import Callable

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


class FileProbe:
    """Reports a file ready once its size has been stable for ``window`` ms.

    The size cache lives on the instance, so each wait operation starts with
    a fresh stabilization clock for every path.
    """

    def __init__(
        self,
        window: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        verbose: bool = False,
    ) -> None:
        self.window = window
        self.verbose = verbose
        self._clock = clock
        self._sizes: dict[str, tuple[int, float]] = {}

    async def check(self, path: str) -> bool:
        if any(ch in path for ch in _GLOB_CHARS):
            return await self._check_pattern(path)
        return await self._check_path(path)

    async def _check_path(self, path: str) -> bool:
        try:
            stat = await asyncio.to_thread(os.stat, path)
        except OSError as exc:
            self._sizes.pop(path, None)
            if self.verbose:
                logger.debug("File %s is not accessible: %s", path, exc)
            return False

        size = stat.st_size
        now = self._clock()
        cached = self._sizes.get(path)
        if cached is not None and cached[0] == size:
            stable_ms = (now - cached[1]) * 1000
            if stable_ms >= self.window:
                if self.verbose:
                    logger.debug("File %s stabilized at %d bytes", path, size)
                return True
            return False

        if self.verbose:
            logger.debug("File %s has size %d", path, size)
        self._sizes[path] = (size, now)
        return False

    async def _check_pattern(self, pattern: str) -> bool:
        matches = await asyncio.to_thread(glob.glob, pattern)
        if self.verbose:
            logger.debug("Pattern %s matched %d files", pattern, len(matches))
        if not matches:
            return False
        results = await asyncio.gather(*(self._check_path(path) for path in matches))
        return all(results)
