"""Pydantic data models for resources, polling state, and results."""

from iwait.models.resource import ResourceDescriptor, ResourceType
from iwait.models.result import WaitResult
from iwait.models.state import ResourceState

__all__ = [
    "ResourceDescriptor",
    "ResourceState",
    "ResourceType",
    "WaitResult",
]
