"""Poll scheduler: drives probe rounds until a strategy, timeout, or abort ends the wait.

Lifecycle::

    IDLE -> DELAYED -> POLLING -> SUCCEEDED | TIMED_OUT | ABORTED

Every round probes all resources concurrently and joins on them before the
strategy is evaluated. Under ``race`` the strategy is also evaluated as each
probe settles, so a single ready resource ends the wait without waiting for
slower siblings. Whichever of success, timeout, or abort happens first is the
only terminal transition; it releases the interval timer, the timeout timer,
the cancellation watcher, and the in-flight round before the caller resumes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum

from iwait.config.models import Strategy, WaitConfig
from iwait.engine.strategy import evaluate
from iwait.engine.timers import TimerScope
from iwait.errors import AbortError, IWaitError, WaitTimeoutError
from iwait.models.resource import ResourceDescriptor
from iwait.models.result import WaitResult
from iwait.models.state import ResourceState
from iwait.probes import Prober

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    DELAYED = "delayed"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({
    SchedulerState.SUCCEEDED,
    SchedulerState.TIMED_OUT,
    SchedulerState.ABORTED,
})


def build_result(
    states: Sequence[ResourceState],
    strategy: Strategy,
    threshold: int | None,
    elapsed: float,
) -> WaitResult:
    """Project final per-resource state into a :class:`WaitResult`."""
    return WaitResult(
        success=evaluate(states, strategy, threshold),
        ready=[s.resource for s in states if s.ready],
        not_ready=[s.resource for s in states if not s.ready],
        errors={s.resource: s.error for s in states if s.error is not None},
        elapsed=elapsed,
    )


class PollScheduler:
    """Runs one wait operation over already-parsed descriptors.

    A scheduler is single-use: :meth:`run` may be awaited once.
    """

    def __init__(
        self,
        config: WaitConfig,
        descriptors: Sequence[ResourceDescriptor],
        prober: Prober,
    ) -> None:
        self.config = config
        self.descriptors = list(descriptors)
        self.prober = prober
        self.state = SchedulerState.IDLE
        self.rounds = 0
        self.states: dict[str, ResourceState] = {
            d.original_uri: ResourceState(resource=d.original_uri)
            for d in self.descriptors
        }
        self._scope: TimerScope | None = None
        self._outcome: asyncio.Future[WaitResult] | None = None
        self._round_task: asyncio.Task[None] | None = None
        self._started = 0.0

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    async def run(self) -> WaitResult:
        if self.state is not SchedulerState.IDLE:
            raise IWaitError("PollScheduler.run() can only be called once")
        loop = asyncio.get_running_loop()
        self._started = loop.time()

        if not self.states:
            self.state = SchedulerState.SUCCEEDED
            return self.result()

        signal = self.config.cancellation_signal
        if signal is not None and signal.is_set():
            self.state = SchedulerState.ABORTED
            raise AbortError()

        self._outcome = loop.create_future()
        async with TimerScope(loop) as scope:
            self._scope = scope
            self.state = SchedulerState.DELAYED
            scope.schedule("delay", self.config.delay, self._start_polling)
            if self.config.timeout is not None:
                scope.schedule("timeout", self.config.timeout, self._on_timeout)
            if signal is not None:
                scope.spawn(self._watch_cancellation(signal))
            return await self._outcome

    def result(self) -> WaitResult:
        """Aggregate the current state. Used once, at termination."""
        elapsed = (asyncio.get_running_loop().time() - self._started) * 1000
        return build_result(
            list(self.states.values()),
            self.config.strategy,
            self.config.threshold,
            elapsed,
        )

    def _start_polling(self) -> None:
        if self.finished:
            return
        self.state = SchedulerState.POLLING
        if self.config.verbose:
            logger.debug("Polling %d resources every %dms", len(self.descriptors), self.config.interval)
        self._tick()

    def _tick(self) -> None:
        if self.finished or self._scope is None:
            return
        self._scope.schedule("interval", self.config.interval, self._tick)
        if self._round_task is not None and not self._round_task.done():
            if self.config.verbose:
                logger.debug("Round %d still in flight, skipping tick", self.rounds)
            return
        self._round_task = self._scope.spawn(self._run_round())

    async def _run_round(self) -> None:
        self.rounds += 1
        limiter = None
        if self.config.simultaneous is not None:
            limiter = asyncio.Semaphore(self.config.simultaneous)
        await asyncio.gather(*(self._probe(d, limiter) for d in self.descriptors))
        if self.finished:
            return
        self._log_progress()
        if evaluate(list(self.states.values()), self.config.strategy, self.config.threshold):
            self._succeed()

    async def _probe(
        self,
        descriptor: ResourceDescriptor,
        limiter: asyncio.Semaphore | None,
    ) -> None:
        resource = descriptor.original_uri
        if self.config.verbose:
            logger.debug("Checking resource: %s", resource)
        try:
            if limiter is None:
                verdict = await self.prober.check(descriptor)
            else:
                async with limiter:
                    verdict = await self.prober.check(descriptor)
        except Exception as exc:
            if self.finished:
                return
            if self.config.verbose:
                logger.debug("Error checking resource %s: %s", resource, exc)
            self._update(resource, ready=False, error=exc)
            return

        if self.finished:
            return
        ready = not verdict if self.config.reverse else bool(verdict)
        self._update(resource, ready=ready, error=None)
        if ready and self.config.strategy is Strategy.RACE:
            self._succeed()

    def _update(self, resource: str, *, ready: bool, error: Exception | None) -> None:
        state = self.states[resource]
        state.ready = ready
        state.error = error
        state.last_checked = datetime.now(timezone.utc)

    def _log_progress(self) -> None:
        if not self.config.log:
            return
        pending = [s.resource for s in self.states.values() if not s.ready]
        if pending:
            logger.info("Waiting for %d resources: %s", len(pending), ", ".join(pending))
        else:
            logger.info("All resources ready")

    def _succeed(self) -> None:
        if self.finished:
            return
        self._finish(SchedulerState.SUCCEEDED, result=self.result())

    def _on_timeout(self) -> None:
        if self.finished:
            return
        result = self.result()
        if self.config.log:
            logger.info("Timed out waiting for: %s", ", ".join(result.not_ready))
        error = WaitTimeoutError(self.config.timeout or 0, result.not_ready, result)
        self._finish(SchedulerState.TIMED_OUT, error=error)

    async def _watch_cancellation(self, signal: asyncio.Event) -> None:
        await signal.wait()
        if self.config.log:
            logger.info("Wait aborted")
        self._finish(SchedulerState.ABORTED, error=AbortError())

    def _finish(
        self,
        state: SchedulerState,
        *,
        result: WaitResult | None = None,
        error: Exception | None = None,
    ) -> None:
        if self.finished:
            return
        self.state = state
        # Timers go first so nothing fires after the caller resumes
        if self._scope is not None:
            self._scope.release()
        if self._outcome is None or self._outcome.done():
            return
        if error is not None:
            self._outcome.set_exception(error)
        else:
            self._outcome.set_result(result)  # type: ignore[arg-type]
