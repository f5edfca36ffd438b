"""Poll scheduling and completion strategies."""

from iwait.engine.scheduler import (
    TERMINAL_STATES,
    PollScheduler,
    SchedulerState,
    build_result,
)
from iwait.engine.strategy import evaluate
from iwait.engine.timers import TimerScope

__all__ = [
    "TERMINAL_STATES",
    "PollScheduler",
    "SchedulerState",
    "TimerScope",
    "build_result",
    "evaluate",
]
