"""HTTP transport performing a single request/response exchange.

The transport is the only part of restchain that touches the network. It
owns one synchronous and one asynchronous httpx client sharing the same
timeout configuration:

    HttpxTransport (this module)
        └─ httpx.Client       (blocking verbs: Api.get, ...)
        └─ httpx.AsyncClient  (async verbs: Api.aget, ...)

No retries, caching or streaming are done here; failures surface as
httpx.HTTPError subclasses and are propagated to the caller unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from restchain.config import Settings
from restchain.request import RequestOptions

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Interface the Api handle uses to reach the network."""

    def perform(self, url: httpx.URL | str, options: RequestOptions) -> httpx.Response:
        ...

    async def aperform(self, url: httpx.URL | str, options: RequestOptions) -> httpx.Response:
        ...

    def close(self) -> None:
        ...

    async def aclose(self) -> None:
        ...


@dataclass
class TransportConfig:
    """Timeouts and connection behavior for HttpxTransport."""

    # Timeout settings (seconds)
    default_timeout: float = 60.0
    connect_timeout: float = 10.0
    write_timeout: float = 10.0
    pool_timeout: float = 5.0

    follow_redirects: bool = True
    verify: bool = True

    def __post_init__(self):
        """Validate configuration."""
        for name in ("default_timeout", "connect_timeout", "write_timeout", "pool_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransportConfig":
        return cls(
            default_timeout=settings.timeout,
            connect_timeout=settings.connect_timeout,
            write_timeout=settings.write_timeout,
            pool_timeout=settings.pool_timeout,
            follow_redirects=settings.follow_redirects,
            verify=settings.verify_ssl,
        )

    def build_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.default_timeout,
            write=self.write_timeout,
            pool=self.pool_timeout
        )


class HttpxTransport:
    """Transport backed by httpx, usable from sync and async code.

    Args:
        config: Timeouts and connection behavior
        transport: Optional httpx transport for the sync client
            (e.g. httpx.MockTransport in tests)
        async_transport: Optional httpx transport for the async client;
            defaults to `transport` when that is given
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or TransportConfig()
        if async_transport is None and isinstance(transport, httpx.AsyncBaseTransport):
            async_transport = transport

        timeout_config = self.config.build_timeout()

        self._sync_client = httpx.Client(
            timeout=timeout_config,
            follow_redirects=self.config.follow_redirects,
            verify=self.config.verify,
            transport=transport,
        )
        self._async_client = httpx.AsyncClient(
            timeout=timeout_config,
            follow_redirects=self.config.follow_redirects,
            verify=self.config.verify,
            transport=async_transport,
        )

        logger.debug(
            f"Initialized HttpxTransport: timeout={self.config.default_timeout}s, "
            f"follow_redirects={self.config.follow_redirects}"
        )

    def perform(self, url: httpx.URL | str, options: RequestOptions) -> httpx.Response:
        """Send one request with the blocking client.

        Raises:
            httpx.HTTPError: On connection, protocol or timeout failures
        """
        method = options.method.value
        logger.debug("request_sent", extra={"method": method, "url": str(url)})
        response = self._sync_client.request(
            method, url, headers=options.headers, content=options.body
        )
        logger.debug(
            "response_received",
            extra={"method": method, "url": str(url), "status_code": response.status_code},
        )
        return response

    async def aperform(self, url: httpx.URL | str, options: RequestOptions) -> httpx.Response:
        """Send one request with the async client.

        Raises:
            httpx.HTTPError: On connection, protocol or timeout failures
        """
        method = options.method.value
        logger.debug("request_sent", extra={"method": method, "url": str(url)})
        response = await self._async_client.request(
            method, url, headers=options.headers, content=options.body
        )
        logger.debug(
            "response_received",
            extra={"method": method, "url": str(url), "status_code": response.status_code},
        )
        return response

    def close(self):
        """Close synchronous HTTP client."""
        self._sync_client.close()
        logger.debug("Closed synchronous HTTP client")

    async def aclose(self):
        """Close asynchronous HTTP client."""
        await self._async_client.aclose()
        logger.debug("Closed asynchronous HTTP client")
