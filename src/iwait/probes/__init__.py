"""Readiness probes and the per-operation dispatcher."""

from __future__ import annotations

from typing import Any, Protocol

from iwait.config.models import WaitConfig
from iwait.errors import ResourceError
from iwait.models.resource import ResourceDescriptor, ResourceType
from iwait.parser import parse_tcp_target
from iwait.probes.directory import check_dir
from iwait.probes.file import FileProbe
from iwait.probes.http import HttpProbe
from iwait.probes.ping import check_ping
from iwait.probes.socket import check_socket
from iwait.probes.tcp import check_tcp


class Prober(Protocol):
    """Anything that can check a descriptor's readiness."""

    async def check(self, descriptor: ResourceDescriptor) -> bool: ...


class ResourceProber:
    """Dispatches each descriptor to the probe for its type.

    Holds the stateful parts of probing (file size cache, HTTP clients), so
    one instance serves exactly one wait operation. Use as an async context
    manager to release HTTP connections.
    """

    def __init__(self, config: WaitConfig) -> None:
        self.config = config
        self.files = FileProbe(config.window, verbose=config.verbose)
        self.http = HttpProbe(config)

    async def check(self, descriptor: ResourceDescriptor) -> bool:
        config = self.config
        verbose = config.verbose
        match descriptor.type:
            case ResourceType.FILE:
                return await self.files.check(descriptor.uri)
            case (
                ResourceType.HTTP
                | ResourceType.HTTPS
                | ResourceType.HTTP_GET
                | ResourceType.HTTPS_GET
            ):
                return await self.http.check(descriptor)
            case ResourceType.TCP:
                if descriptor.host is None or descriptor.port is None:
                    host, port = parse_tcp_target(descriptor.uri)
                else:
                    host, port = descriptor.host, descriptor.port
                return await check_tcp(host, port, config.tcp_timeout, verbose=verbose)
            case ResourceType.SOCKET:
                return await check_socket(descriptor.uri, config.tcp_timeout, verbose=verbose)
            case ResourceType.PING:
                return await check_ping(descriptor.uri, verbose=verbose)
            case ResourceType.DIR:
                return await check_dir(
                    descriptor.uri, not_empty=config.dir_not_empty, verbose=verbose,
                )
            case _:
                raise ResourceError(
                    descriptor.original_uri, f"unsupported resource type {descriptor.type}",
                )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> ResourceProber:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


__all__ = [
    "FileProbe",
    "HttpProbe",
    "Prober",
    "ResourceProber",
    "check_dir",
    "check_ping",
    "check_socket",
    "check_tcp",
]
