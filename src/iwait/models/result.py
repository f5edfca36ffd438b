"""Final result of a wait operation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class WaitResult(BaseModel):
    """Outcome of one wait, computed once at termination.

    ``elapsed`` is in milliseconds. ``errors`` holds the last error seen for
    each resource whose probe raised.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    ready: list[str] = Field(default_factory=list)
    not_ready: list[str] = Field(default_factory=list)
    errors: dict[str, Exception] = Field(default_factory=dict)
    elapsed: float = 0.0

    @field_serializer("errors")
    def serialize_errors(self, errors: dict[str, Exception]) -> dict[str, str]:
        return {name: str(exc) or type(exc).__name__ for name, exc in errors.items()}
