"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from pathlib import Path
from typing import Any

import pytest

from iwait.config.manager import ConfigManager
from iwait.models.resource import ResourceDescriptor


class ScriptedProber:
    """Fake prober answering from a per-resource script.

    Each call consumes the next answer; the last answer repeats. An answer
    that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        scripts: dict[str, list[Any]],
        delays: dict[str, float] | None = None,
    ) -> None:
        self.scripts = scripts
        self.delays = delays or {}
        self.calls: dict[str, int] = defaultdict(int)
        self.call_times: dict[str, list[float]] = defaultdict(list)
        self.in_flight = 0
        self.max_in_flight = 0
        self.cancelled: list[str] = []

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def check(self, descriptor: ResourceDescriptor) -> bool:
        name = descriptor.original_uri
        index = self.calls[name]
        self.calls[name] += 1
        self.call_times[name].append(asyncio.get_running_loop().time())
        script = self.scripts[name]
        answer = script[min(index, len(script) - 1)]

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(name, 0)
            if delay:
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.cancelled.append(name)
            raise
        finally:
            self.in_flight -= 1

        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def make_prober():
    """Return the ScriptedProber class for building fakes."""
    return ScriptedProber


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and config file out of tests."""
    for var in ("IWAIT_TIMEOUT", "IWAIT_INTERVAL", "IWAIT_DELAY", "IWAIT_STRATEGY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("IWAIT_CONFIG", str(tmp_path / "user-config.toml"))
