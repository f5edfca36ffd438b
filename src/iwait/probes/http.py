"""HTTP(S) probe: HEAD or GET with status validation."""

from __future__ import annotations

import logging

import httpx

from iwait.config.models import WaitConfig
from iwait.models.resource import ResourceDescriptor

logger = logging.getLogger(__name__)


def resolve_auth(config: WaitConfig) -> httpx.Auth | None:
    """Resolve probe authentication from the wait configuration."""
    creds = config.basic_auth
    if creds is not None and creds.username:
        return httpx.BasicAuth(creds.username, creds.password)
    return None


class HttpProbe:
    """Asynchronous HTTP client shared by every HTTP resource of one wait.

    One ``httpx.AsyncClient`` is kept per Unix socket path (``None`` for
    plain TCP), so connections are reused across rounds.
    """

    def __init__(self, config: WaitConfig) -> None:
        self.config = config
        self._clients: dict[str | None, httpx.AsyncClient] = {}

    def _client(self, socket_path: str | None) -> httpx.AsyncClient:
        client = self._clients.get(socket_path)
        if client is None:
            transport = None
            if socket_path is not None:
                transport = httpx.AsyncHTTPTransport(
                    uds=socket_path, http2=self.config.http2,
                )
            client = httpx.AsyncClient(
                auth=resolve_auth(self.config),
                headers=self.config.headers,
                timeout=self.config.http_timeout / 1000,
                follow_redirects=self.config.follow_redirect,
                http2=self.config.http2,
                transport=transport,
            )
            self._clients[socket_path] = client
        return client

    async def check(self, descriptor: ResourceDescriptor) -> bool:
        method = descriptor.method or "HEAD"
        url = descriptor.uri
        client = self._client(descriptor.socket_path)
        try:
            response = await client.request(method, url)
        except httpx.TimeoutException as exc:
            if self.config.verbose:
                logger.debug("HTTP %s %s timed out: %s", method, url, exc)
            return False
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            if self.config.verbose:
                logger.debug("HTTP %s %s failed: %s", method, url, exc)
            return False

        if self.config.verbose:
            logger.debug("HTTP %s %s returned %d", method, url, response.status_code)
        return self.config.validate_status(response.status_code)

    async def aclose(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()
