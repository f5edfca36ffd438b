"""Resource descriptor models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ResourceType(str, Enum):
    """The kinds of resource a probe knows how to check."""

    FILE = "file"
    HTTP = "http"
    HTTPS = "https"
    HTTP_GET = "http-get"
    HTTPS_GET = "https-get"
    TCP = "tcp"
    SOCKET = "socket"
    PING = "ping"
    DIR = "dir"

    @property
    def is_http(self) -> bool:
        return self in _HTTP_TYPES


_HTTP_TYPES = frozenset({
    ResourceType.HTTP,
    ResourceType.HTTPS,
    ResourceType.HTTP_GET,
    ResourceType.HTTPS_GET,
})


class ResourceDescriptor(BaseModel):
    """A parsed resource identifier.

    ``uri`` is what the probe acts on (a path, URL, host, or ``host:port``);
    ``original_uri`` is the identifier exactly as the caller wrote it.
    """

    model_config = ConfigDict(frozen=True)

    type: ResourceType
    uri: str
    original_uri: str
    host: str | None = None
    port: int | None = None
    socket_path: str | None = None
    method: str | None = None
