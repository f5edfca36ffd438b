"""Configuration manager: read/write TOML defaults, resolve wait options."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import tomli_w
from pydantic import TypeAdapter, ValidationError

from iwait.config.constants import (
    CONFIG_FILE,
    ENV_CONFIG_FILE,
    ENV_DELAY,
    ENV_INTERVAL,
    ENV_STRATEGY,
    ENV_TIMEOUT,
)
from iwait.config.models import (
    IWaitSettings,
    OptionsProfile,
    WaitConfig,
    normalize_option,
)
from iwait.errors import ConfigurationError

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

_ENV_OPTIONS = {
    ENV_TIMEOUT: "timeout",
    ENV_INTERVAL: "interval",
    ENV_DELAY: "delay",
    ENV_STRATEGY: "strategy",
}


def _field_adapter(name: str) -> TypeAdapter[Any]:
    field = WaitConfig.model_fields[name]
    if field.metadata:
        return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
    return TypeAdapter(field.annotation)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )


class ConfigManager:
    """Manages stored wait defaults on disk and resolves a WaitConfig."""

    def __init__(self, config_path: Path | None = None) -> None:
        env_path = os.environ.get(ENV_CONFIG_FILE)
        self.config_path = config_path or (Path(env_path) if env_path else CONFIG_FILE)
        self._config: IWaitSettings | None = None

    @property
    def config(self) -> IWaitSettings:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> IWaitSettings:
        if not self.config_path.exists():
            return IWaitSettings()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid config file {self.config_path}: {exc}") from exc
        profiles: dict[str, OptionsProfile] = {}
        for name, options in data.get("profiles", {}).items():
            profiles[name] = OptionsProfile(name=name, options=self._normalize(options, name))
        return IWaitSettings(
            default_profile=data.get("default_profile"),
            profiles=profiles,
        )

    @staticmethod
    def _normalize(options: Mapping[str, Any], source: str) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for key, value in options.items():
            name = normalize_option(key)
            if name is None:
                raise ConfigurationError(f"Unknown option '{key}' in {source}")
            normalized[name] = value
        return normalized

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        if self.config.profiles:
            data["profiles"] = {
                name: dict(profile.options) for name, profile in self.config.profiles.items()
            }
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def get_profile(self, name: str | None = None) -> OptionsProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def set_option(self, profile_name: str, key: str, value: Any) -> Any:
        """Validate and store one option, returning the stored value."""
        name = normalize_option(key)
        if name is None:
            raise ConfigurationError(f"Unknown option '{key}'")
        profile = self.config.profiles.get(profile_name)
        existing = profile.options if profile else {}
        try:
            WaitConfig(resources=[], **{**existing, name: value})
        except ValidationError as exc:
            raise ConfigurationError(_validation_message(exc)) from exc
        # Store the input as given; cross-field adjustments happen in resolve()
        stored = _field_adapter(name).validate_python(value)
        if isinstance(stored, Enum):
            stored = stored.value
        elif hasattr(stored, "model_dump"):
            stored = stored.model_dump()
        if profile is None:
            profile = OptionsProfile(name=profile_name)
            self.config.profiles[profile_name] = profile
        profile.options[name] = stored
        if not self.config.default_profile:
            self.config.default_profile = profile_name
        self.save()
        return stored

    def unset_option(self, profile_name: str, key: str) -> bool:
        name = normalize_option(key)
        profile = self.config.profiles.get(profile_name)
        if name is None or profile is None or name not in profile.options:
            return False
        del profile.options[name]
        self.save()
        return True

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def env_options(self) -> dict[str, Any]:
        return {
            option: os.environ[var] for var, option in _ENV_OPTIONS.items() if os.environ.get(var)
        }

    def resolve(
        self,
        resources: Iterable[str],
        *,
        profile_name: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> WaitConfig:
        """Build the WaitConfig for one run.

        Precedence: explicit overrides > env vars > config profile > defaults.
        ``None`` overrides mean "not given".
        """
        if profile_name and profile_name not in self.config.profiles:
            raise ConfigurationError(f"Profile '{profile_name}' not found in {self.config_path}")
        profile = self.get_profile(profile_name)
        options: dict[str, Any] = dict(profile.options) if profile else {}
        options.update(self.env_options())
        if overrides:
            options.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return WaitConfig(resources=list(resources), **options)
        except ValidationError as exc:
            raise ConfigurationError(_validation_message(exc)) from exc
