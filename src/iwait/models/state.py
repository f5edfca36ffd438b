"""Per-resource polling state."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ResourceState(BaseModel):
    """Readiness of one resource, updated in place after every probe."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    resource: str
    ready: bool = False
    error: Exception | None = None
    last_checked: datetime | None = None
