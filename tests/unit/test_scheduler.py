"""Tests for the poll scheduler: strategies, timeout, abort, and teardown."""

from __future__ import annotations

import asyncio

import pytest

from iwait.config.models import Strategy, WaitConfig
from iwait.engine.scheduler import PollScheduler, SchedulerState
from iwait.errors import AbortError, IWaitError, WaitTimeoutError
from iwait.parser import parse_resources


def _scheduler(prober, resources, **options) -> PollScheduler:
    options.setdefault("interval", 20)
    config = WaitConfig(resources=resources, **options)
    return PollScheduler(config, parse_resources(resources), prober)


@pytest.mark.asyncio
class TestStrategies:
    async def test_all_waits_for_every_resource(self, make_prober):
        prober = make_prober({"a": [True], "b": [False, False, True]})
        sched = _scheduler(prober, ["a", "b"])
        result = await sched.run()
        assert result.success is True
        assert result.ready == ["a", "b"]
        assert result.not_ready == []
        assert sched.rounds == 3
        assert sched.state is SchedulerState.SUCCEEDED

    async def test_threshold_one_of_two(self, make_prober):
        prober = make_prober({"a": [False], "b": [False, True]})
        sched = _scheduler(prober, ["a", "b"], strategy=Strategy.THRESHOLD, threshold=1)
        result = await sched.run()
        assert result.success is True
        assert result.ready == ["b"]
        assert result.not_ready == ["a"]
        assert sched.rounds == 2

    async def test_threshold_default_behaves_like_all(self, make_prober):
        prober = make_prober({"a": [True], "b": [False, True]})
        sched = _scheduler(prober, ["a", "b"], strategy=Strategy.THRESHOLD)
        result = await sched.run()
        assert result.ready == ["a", "b"]
        assert sched.rounds == 2

    async def test_any_completes_after_round(self, make_prober):
        prober = make_prober({"a": [False], "b": [False, True]})
        result = await _scheduler(prober, ["a", "b"], strategy="any").run()
        assert result.success is True
        assert result.ready == ["b"]

    async def test_any_waits_for_slow_sibling(self, make_prober):
        prober = make_prober({"fast": [True], "slow": [False]}, delays={"slow": 0.3})
        loop = asyncio.get_running_loop()
        start = loop.time()
        result = await _scheduler(prober, ["fast", "slow"], strategy="any").run()
        assert result.success is True
        assert loop.time() - start >= 0.3

    async def test_race_ends_before_slow_sibling(self, make_prober):
        prober = make_prober(
            {"fast": [True], "slow": [False]},
            delays={"fast": 0.01, "slow": 0.3},
        )
        loop = asyncio.get_running_loop()
        start = loop.time()
        sched = _scheduler(prober, ["fast", "slow"], strategy=Strategy.RACE)
        result = await sched.run()
        assert loop.time() - start < 0.2
        assert result.success is True
        assert result.ready == ["fast"]
        assert result.not_ready == ["slow"]
        assert prober.cancelled == ["slow"]

        calls = prober.total_calls
        await asyncio.sleep(0.1)
        assert prober.total_calls == calls

    async def test_reverse_waits_for_unavailability(self, make_prober):
        prober = make_prober({"a": [True, True, False]})
        sched = _scheduler(prober, ["a"], reverse=True)
        result = await sched.run()
        assert result.success is True
        assert result.ready == ["a"]
        assert sched.rounds == 3


@pytest.mark.asyncio
class TestTimeout:
    async def test_timeout_raises_with_result(self, make_prober):
        prober = make_prober({"a": [False], "b": [False]})
        sched = _scheduler(prober, ["a", "b"], timeout=100)
        with pytest.raises(WaitTimeoutError) as exc_info:
            await sched.run()

        exc = exc_info.value
        assert exc.timeout == 100
        assert exc.not_ready == ["a", "b"]
        assert exc.result is not None
        assert exc.result.success is False
        assert exc.result.elapsed >= 90
        assert "a, b" in str(exc)
        assert sched.state is SchedulerState.TIMED_OUT

        calls = prober.total_calls
        await asyncio.sleep(0.1)
        assert prober.total_calls == calls

    async def test_timeout_reports_partial_threshold(self, make_prober):
        prober = make_prober({"a": [True], "b": [False], "c": [False]})
        sched = _scheduler(
            prober, ["a", "b", "c"], strategy="threshold", threshold=2, timeout=80,
        )
        with pytest.raises(WaitTimeoutError) as exc_info:
            await sched.run()
        result = exc_info.value.result
        assert result.ready == ["a"]
        assert result.not_ready == ["b", "c"]
        assert result.success is False

    async def test_timeout_is_a_timeout_error(self, make_prober):
        prober = make_prober({"a": [False]})
        with pytest.raises(TimeoutError):
            await _scheduler(prober, ["a"], timeout=50).run()

    async def test_timeout_during_delay(self, make_prober):
        prober = make_prober({"a": [True]})
        with pytest.raises(WaitTimeoutError):
            await _scheduler(prober, ["a"], delay=500, timeout=50).run()
        assert prober.total_calls == 0


@pytest.mark.asyncio
class TestErrors:
    async def test_probe_exception_is_isolated(self, make_prober):
        boom = RuntimeError("boom")
        prober = make_prober({"a": [boom], "b": [True]})
        sched = _scheduler(prober, ["a", "b"], timeout=80)
        with pytest.raises(WaitTimeoutError) as exc_info:
            await sched.run()
        result = exc_info.value.result
        assert result.ready == ["b"]
        assert result.errors == {"a": boom}
        assert sched.rounds > 1

    async def test_error_cleared_on_next_success(self, make_prober):
        prober = make_prober({"a": [OSError("refused"), True]})
        sched = _scheduler(prober, ["a"])
        result = await sched.run()
        assert result.success is True
        assert result.errors == {}
        assert sched.states["a"].error is None
        assert sched.states["a"].last_checked is not None

    async def test_reverse_does_not_invert_errors(self, make_prober):
        prober = make_prober({"a": [ValueError("bad")]})
        with pytest.raises(WaitTimeoutError) as exc_info:
            await _scheduler(prober, ["a"], reverse=True, timeout=60).run()
        assert exc_info.value.result.not_ready == ["a"]


@pytest.mark.asyncio
class TestAbort:
    async def test_abort_mid_wait(self, make_prober):
        prober = make_prober({"a": [False]})
        signal = asyncio.Event()
        sched = _scheduler(prober, ["a"], cancellation_signal=signal)
        asyncio.get_running_loop().call_later(0.05, signal.set)
        with pytest.raises(AbortError, match="Operation aborted"):
            await sched.run()
        assert sched.state is SchedulerState.ABORTED

        calls = prober.total_calls
        await asyncio.sleep(0.08)
        assert prober.total_calls == calls

    async def test_preset_signal_aborts_before_probing(self, make_prober):
        prober = make_prober({"a": [True]})
        signal = asyncio.Event()
        signal.set()
        with pytest.raises(AbortError):
            await _scheduler(prober, ["a"], cancellation_signal=signal).run()
        assert prober.total_calls == 0

    async def test_abort_beats_longer_timeout(self, make_prober):
        prober = make_prober({"a": [False]})
        signal = asyncio.Event()
        asyncio.get_running_loop().call_later(0.03, signal.set)
        with pytest.raises(AbortError):
            await _scheduler(
                prober, ["a"], cancellation_signal=signal, timeout=1000,
            ).run()

    async def test_caller_cancellation_tears_down(self, make_prober):
        prober = make_prober({"a": [False]})
        sched = _scheduler(prober, ["a"])
        task = asyncio.create_task(sched.run())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        calls = prober.total_calls
        await asyncio.sleep(0.08)
        assert prober.total_calls == calls


@pytest.mark.asyncio
class TestScheduling:
    async def test_zero_resources_succeed_immediately(self, make_prober):
        prober = make_prober({})
        sched = _scheduler(prober, [])
        result = await sched.run()
        assert result.success is True
        assert result.ready == []
        assert sched.rounds == 0

    async def test_delay_postpones_first_round(self, make_prober):
        prober = make_prober({"a": [True]})
        loop = asyncio.get_running_loop()
        start = loop.time()
        await _scheduler(prober, ["a"], delay=100).run()
        assert prober.call_times["a"][0] - start >= 0.09

    async def test_rounds_do_not_overlap(self, make_prober):
        prober = make_prober({"a": [False, False, True]}, delays={"a": 0.05})
        sched = _scheduler(prober, ["a"], interval=10)
        await sched.run()
        assert prober.max_in_flight == 1
        assert sched.rounds == 3

    async def test_simultaneous_caps_in_flight_probes(self, make_prober):
        names = ["a", "b", "c", "d"]
        prober = make_prober(
            {name: [True] for name in names},
            delays={name: 0.02 for name in names},
        )
        await _scheduler(prober, names, simultaneous=2).run()
        assert prober.max_in_flight == 2

    async def test_probes_run_concurrently_by_default(self, make_prober):
        names = ["a", "b", "c"]
        prober = make_prober(
            {name: [True] for name in names},
            delays={name: 0.02 for name in names},
        )
        await _scheduler(prober, names).run()
        assert prober.max_in_flight == 3

    async def test_run_twice_raises(self, make_prober):
        prober = make_prober({"a": [True]})
        sched = _scheduler(prober, ["a"])
        await sched.run()
        with pytest.raises(IWaitError, match="only be called once"):
            await sched.run()
