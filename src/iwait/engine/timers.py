"""Scoped ownership of the timers and tasks of one wait operation."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any


class TimerScope:
    """Named timers and background tasks, released together exactly once.

    Use as an async context manager: leaving the block cancels every timer
    and task and waits for the tasks to unwind.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._handles: dict[str, asyncio.TimerHandle] = {}
        self._tasks: set[asyncio.Task[Any]] = set()
        self.released = False

    def schedule(self, name: str, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``delay`` ms, replacing any timer of the same name."""
        if self.released:
            return
        self.cancel(name)
        self._handles[name] = self._loop.call_later(delay / 1000, callback)

    def cancel(self, name: str) -> None:
        handle = self._handles.pop(name, None)
        if handle is not None:
            handle.cancel()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        if self.released:
            coro.close()
            raise RuntimeError("Timer scope already released")
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def active(self) -> int:
        """Number of timers and tasks still held."""
        return len(self._handles) + len(self._tasks)

    def release(self) -> None:
        """Cancel every timer and task. Idempotent."""
        if self.released:
            return
        self.released = True
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        for task in self._tasks:
            task.cancel()

    async def aclose(self) -> None:
        self.release()
        current = asyncio.current_task()
        pending = [task for task in self._tasks if task is not current]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def __aenter__(self) -> TimerScope:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
