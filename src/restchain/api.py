"""API handle bound to one backend service.

An Api composes request building, auth headers, the transport and the
middleware chain into one method per REST verb:

    Api (this module)
        └─ build_url / serialize_body / merge_headers  (restchain.request)
        └─ Auth.get_headers()                          (restchain.auth)
        └─ Transport.perform / aperform                (restchain.transport)
        └─ MiddlewareChain.execute / execute_sync      (restchain.middleware)

Usage:
    api = Api("https://api.example.com", Auth.bearer("abc"), None, json_middleware)

    # Blocking
    items = api.get("/items", logging_middleware)

    # Async
    items = await api.aget("/items", logging_middleware)

Middleware passed to a single call only apply to that call; `use()`
registers middleware for every later call on the handle.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from restchain.auth import Auth
from restchain.config import Settings, settings as default_settings
from restchain.middleware import Middleware, MiddlewareChain
from restchain.request import (
    HeadersType,
    QueryParams,
    RequestOptions,
    RestMethod,
    build_url,
    merge_headers,
    serialize_body,
)
from restchain.transport import HttpxTransport, Transport, TransportConfig

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = {"Content-Type": "application/json"}


class Api:
    """Client handle for one REST service.

    Args:
        base_url: Absolute URL every request path is resolved against
        auth: Auth strategy applied to every request (default: no auth)
        headers: Handle-level headers sent with every request
        *middleware: Handle-level middleware, run before call-level ones
        transport: Transport to use (default: HttpxTransport from settings)
        settings: Settings used to build the default transport

    Raises:
        ValueError: If base_url is not an absolute URL
    """

    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        headers: HeadersType | None = None,
        *middleware: Middleware,
        transport: Transport | None = None,
        settings: Settings | None = None,
    ):
        if not httpx.URL(base_url).is_absolute_url:
            raise ValueError(f"base_url must be an absolute URL, got {base_url!r}")

        self._base_url = base_url
        self._auth = auth or Auth.none()
        items = headers.items() if isinstance(headers, Mapping) else (headers or [])
        self.headers: list[tuple[str, str]] = [(name, value) for name, value in items]
        self._middleware: list[Middleware] = list(middleware)

        self._owns_transport = transport is None
        if transport is None:
            config = TransportConfig.from_settings(settings or default_settings)
            transport = HttpxTransport(config)
        self.transport = transport

        logger.debug(
            f"Api initialized: base_url={self._base_url}, auth={self._auth.kind.value}, "
            f"middleware={len(self._middleware)}"
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth(self) -> Auth:
        return self._auth

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Snapshot of the handle-level middleware, in execution order."""
        return tuple(self._middleware)

    def use(self, middleware: Middleware) -> None:
        """Register a middleware for every later call on this handle.

        Registering the same middleware twice runs it twice.
        """
        self._middleware.append(middleware)

    def add_header(self, name: str, value: str) -> None:
        """Add a header sent with every later request on this handle."""
        self.headers.append((name, value))

    # Synchronous verbs

    def get(self, path: str, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """GET `path` and return the chain result.

        Args:
            path: Endpoint path relative to base_url
            *middleware: Call-level middleware, run after the handle's
            params: Optional query params

        Returns:
            Response after all middleware (the raw httpx.Response when no
            middleware is configured)

        Raises:
            httpx.HTTPError: On transport failure
            Exception: Anything raised by a middleware
        """
        return self.request(RestMethod.GET, path, None, *middleware, params=params)

    def put(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """PUT `payload` as JSON to `path` and return the chain result."""
        return self.request(RestMethod.PUT, path, payload, *middleware, params=params)

    def post(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """POST `payload` as JSON to `path` and return the chain result."""
        return self.request(RestMethod.POST, path, payload, *middleware, params=params)

    def delete(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """DELETE `path` with `payload` as JSON body and return the chain result."""
        return self.request(RestMethod.DELETE, path, payload, *middleware, params=params)

    def request(
        self,
        method: RestMethod,
        path: str,
        payload: Any = None,
        *middleware: Middleware,
        params: QueryParams | None = None,
    ) -> Any:
        """Send one request with the blocking transport and run the chain over the response.

        Async middleware are rejected here (MiddlewareError); use the `a*`
        verbs for those.
        """
        chain = MiddlewareChain.concat(self._middleware, middleware)
        url, options = self._build_request(method, path, payload, params)
        logger.debug(f"{method.value} {url} ({len(chain)} middleware)")

        response = self.transport.perform(url, options)
        return chain.execute_sync(response)

    # Asynchronous verbs

    async def aget(self, path: str, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """Async version of get()."""
        return await self.arequest(RestMethod.GET, path, None, *middleware, params=params)

    async def aput(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """Async version of put()."""
        return await self.arequest(RestMethod.PUT, path, payload, *middleware, params=params)

    async def apost(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """Async version of post()."""
        return await self.arequest(RestMethod.POST, path, payload, *middleware, params=params)

    async def adelete(self, path: str, payload: Any, *middleware: Middleware, params: QueryParams | None = None) -> Any:
        """Async version of delete()."""
        return await self.arequest(RestMethod.DELETE, path, payload, *middleware, params=params)

    async def arequest(
        self,
        method: RestMethod,
        path: str,
        payload: Any = None,
        *middleware: Middleware,
        params: QueryParams | None = None,
    ) -> Any:
        """Send one request with the async transport and run the chain over the response.

        Plain and coroutine middleware may be mixed.
        """
        chain = MiddlewareChain.concat(self._middleware, middleware)
        url, options = self._build_request(method, path, payload, params)
        logger.debug(f"{method.value} {url} ({len(chain)} middleware)")

        response = await self.transport.aperform(url, options)
        return await chain.execute(response)

    # Helper methods

    def _build_request(
        self,
        method: RestMethod,
        path: str,
        payload: Any,
        params: QueryParams | None
    ) -> tuple[httpx.URL, RequestOptions]:
        """Build the absolute URL and per-call request options.

        Headers are merged into a fresh dict each call: JSON content type
        (for requests with a body), then handle headers, then auth headers.
        """
        url = build_url(self._base_url, path, params)

        if method is RestMethod.GET:
            body = None
            headers = merge_headers(self.headers, self._auth.get_headers())
        else:
            body = serialize_body(payload)
            headers = merge_headers(JSON_CONTENT_TYPE, self.headers, self._auth.get_headers())

        return url, RequestOptions(method=method, headers=headers, body=body)

    def close(self):
        """Close the transport if this handle created it."""
        if self._owns_transport:
            self.transport.close()

    async def aclose(self):
        """Async version of close()."""
        if self._owns_transport:
            await self.transport.aclose()

    def __enter__(self) -> "Api":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    async def __aenter__(self) -> "Api":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"Api(base_url={self._base_url!r}, auth={self._auth!r}, middleware={len(self._middleware)})"
