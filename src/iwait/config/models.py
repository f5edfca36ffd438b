"""Pydantic models for wait configuration."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from iwait.config.constants import (
    DEFAULT_DELAY,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_INTERVAL,
    DEFAULT_TCP_TIMEOUT,
    DEFAULT_WINDOW,
)


class Strategy(str, Enum):
    """How many ready resources make the wait complete."""

    ALL = "all"
    ANY = "any"
    RACE = "race"
    THRESHOLD = "threshold"


class BasicAuthCredentials(BaseModel):
    """Credentials sent with HTTP probes."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = ""


def default_validate_status(status: int) -> bool:
    return 200 <= status < 300


class WaitConfig(BaseModel):
    """Immutable, fully defaulted options for one wait operation.

    All durations are milliseconds. Fields accept camelCase aliases
    (``httpTimeout``, ``dirNotEmpty``...) as well as their own names.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    resources: list[str]
    delay: int = Field(default=DEFAULT_DELAY, ge=0, description="Delay before the first round")
    interval: int = Field(default=DEFAULT_INTERVAL, gt=0, description="Time between round starts")
    timeout: int | None = Field(default=None, gt=0, description="Forced failure deadline")
    strategy: Strategy = Strategy.ALL
    threshold: int | None = Field(
        default=None, ge=1, description="Ready count for the threshold strategy",
    )
    reverse: bool = Field(default=False, description="Wait for resources to go away")
    window: int = Field(
        default=DEFAULT_WINDOW, ge=0, validate_default=True,
        description="File size stabilization window",
    )
    simultaneous: int | None = Field(
        default=None, ge=1, description="Max probes in flight per round",
    )

    # HTTP probes
    http_timeout: int = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    headers: dict[str, str] = Field(default_factory=dict)
    validate_status: Callable[[int], bool] = default_validate_status
    follow_redirect: bool = True
    basic_auth: BasicAuthCredentials | None = None
    http2: bool = False

    # TCP and Unix socket probes
    tcp_timeout: int = Field(default=DEFAULT_TCP_TIMEOUT, gt=0)

    # Directory probes
    dir_not_empty: bool = True

    cancellation_signal: asyncio.Event | None = Field(default=None, exclude=True)
    verbose: bool = False
    log: bool = False

    @field_validator("window")
    @classmethod
    def clamp_window(cls, v: int, info: ValidationInfo) -> int:
        # Stabilization needs two reads at least one interval apart
        return max(v, info.data.get("interval", DEFAULT_INTERVAL))


# Options that only make sense per call, never as stored defaults
RUNTIME_ONLY_OPTIONS = frozenset({"resources", "cancellation_signal", "validate_status"})

OPTION_NAMES = frozenset(WaitConfig.model_fields) - RUNTIME_ONLY_OPTIONS


def normalize_option(key: str) -> str | None:
    """Map a snake_case, camelCase, or kebab-case option name to its field name."""
    candidate = key.replace("-", "_")
    if candidate in OPTION_NAMES:
        return candidate
    for name in OPTION_NAMES:
        if to_camel(name) == key:
            return name
    return None


class OptionsProfile(BaseModel):
    """A named set of stored wait defaults."""

    name: str
    options: dict[str, Any] = Field(default_factory=dict)


class IWaitSettings(BaseModel):
    """Root of the user configuration file."""

    default_profile: str | None = None
    profiles: dict[str, OptionsProfile] = Field(default_factory=dict)
