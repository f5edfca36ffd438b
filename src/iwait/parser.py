"""Resource identifier parsing: ``[TYPE:]value`` strings into descriptors."""

from __future__ import annotations

import re
from collections.abc import Iterable

from iwait.errors import ParseError
from iwait.models.resource import ResourceDescriptor, ResourceType

_PREFIX_RE = re.compile(r"^(https?-get|https?|tcp|socket|file|ping|dir):(.*)$", re.DOTALL)
# Anything that looks like a scheme; single letters are Windows drive letters
_UNKNOWN_PREFIX_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+):")
_HTTP_UNIX_RE = re.compile(r"^http://unix:([^:]+):(.+)$")
_TCP_RE = re.compile(r"^(?:(\[[^\]]*\]|[^:]*):)?(\d+)$")

DEFAULT_TCP_HOST = "localhost"


def parse_resources(resources: Iterable[str]) -> list[ResourceDescriptor]:
    """Parse every identifier, failing on the first malformed one."""
    return [parse_resource(resource) for resource in resources]


def parse_resource(resource: str) -> ResourceDescriptor:
    """Parse a single identifier into a :class:`ResourceDescriptor`.

    Unprefixed values are files. A prefix that is not one of the known
    resource types raises :class:`ParseError`.
    """
    match = _PREFIX_RE.match(resource)
    if match is None:
        unknown = _UNKNOWN_PREFIX_RE.match(resource)
        if unknown:
            raise ParseError(
                f"Invalid resource prefix '{unknown.group(1)}:' in '{resource}'. "
                "Expected one of: file, http, https, http-get, https-get, "
                "tcp, socket, ping, dir."
            )
        if not resource:
            raise ParseError("Empty resource identifier")
        return ResourceDescriptor(
            type=ResourceType.FILE, uri=resource, original_uri=resource,
        )

    rtype = ResourceType(match.group(1))
    rest = match.group(2)
    if not rest:
        raise ParseError(f"Missing value for resource '{resource}'")

    if rtype.is_http:
        return _parse_http(rtype, rest, resource)
    if rtype is ResourceType.TCP:
        host, port = parse_tcp_target(rest)
        return ResourceDescriptor(
            type=rtype, uri=rest, original_uri=resource,
            host=host, port=port,
        )
    return ResourceDescriptor(type=rtype, uri=rest, original_uri=resource)


def _parse_http(rtype: ResourceType, rest: str, resource: str) -> ResourceDescriptor:
    if rtype in (ResourceType.HTTP_GET, ResourceType.HTTPS_GET):
        scheme = rtype.value.removesuffix("-get")
        method = "GET"
    else:
        scheme = rtype.value
        method = "HEAD"
    url = f"{scheme}:{rest}"

    socket_path = None
    unix = parse_http_unix_url(url)
    if unix is not None:
        socket_path, url = unix
    elif not rest.startswith("//"):
        raise ParseError(f"Invalid URL for resource '{resource}': {url}")

    return ResourceDescriptor(
        type=rtype, uri=url, original_uri=resource,
        socket_path=socket_path, method=method,
    )


def parse_http_unix_url(url: str) -> tuple[str, str] | None:
    """Split ``http://unix:<socket>:<url>`` into ``(socket_path, url)``.

    A bare path is resolved against ``http://localhost`` so it can be
    requested over the socket.
    """
    match = _HTTP_UNIX_RE.match(url)
    if match is None:
        return None
    socket_path, target = match.groups()
    if target.startswith("/"):
        target = f"http://localhost{target}"
    return socket_path, target


def parse_tcp_target(value: str) -> tuple[str, int]:
    """Parse a TCP ``[host:]port`` value."""
    match = _TCP_RE.match(value)
    if match is None:
        raise ParseError(
            f"Invalid TCP resource format: {value}. Expected format: [host:]port"
        )
    host, port_str = match.groups()
    if host and host.startswith("["):
        host = host[1:-1]
    port = int(port_str)
    if not 1 <= port <= 65535:
        raise ParseError(
            f"Invalid port number: {port_str}. Port must be between 1 and 65535."
        )
    return host or DEFAULT_TCP_HOST, port
