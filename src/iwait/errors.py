"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from rich.console import Console

if TYPE_CHECKING:
    from iwait.models.result import WaitResult

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class IWaitError(Exception):
    """Base exception for iwait."""

    exit_code: int = 1


class ParseError(IWaitError, ValueError):
    """A resource identifier could not be parsed."""

    exit_code = 2


class WaitTimeoutError(IWaitError, TimeoutError):
    """Resources were still pending when the timeout fired."""

    exit_code = 3

    def __init__(
        self,
        timeout: int,
        not_ready: list[str],
        result: WaitResult | None = None,
    ) -> None:
        self.timeout = timeout
        self.not_ready = not_ready
        self.result = result
        super().__init__(
            f"Timed out after {timeout}ms waiting for: {', '.join(not_ready)}"
        )


class AbortError(IWaitError):
    """The wait was cancelled through its cancellation signal."""

    exit_code = 4

    def __init__(self, message: str = "Operation aborted") -> None:
        super().__init__(message)


class ConfigurationError(IWaitError):
    """Invalid configuration file, environment variable, or option."""

    exit_code = 5


class ResourceError(IWaitError):
    """A probe failed for one resource. Informational only."""

    def __init__(self, resource: str, detail: str = "") -> None:
        self.resource = resource
        super().__init__(f"{resource}: {detail}" if detail else resource)


def error_handler(func: F) -> F:
    """Decorator that catches IWaitError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except IWaitError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
