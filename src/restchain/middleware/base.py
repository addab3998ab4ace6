from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias


class Next(Protocol):
    """Continuation handed to each middleware.

    Calling it with a value advances to the following middleware, or ends
    the chain and yields that value when no middleware remain. Under the
    async driver the return value is an awaitable; under the blocking
    driver it is the downstream result itself.
    """

    def __call__(self, data: Any) -> Any:
        ...


class Middleware(Protocol):
    """Response-transforming step of a chain.

    Receives the current value and the continuation. Forward by returning
    (or awaiting) `next_handler(new_value)`; short-circuit by returning a
    value without calling it; fail the chain by raising.

    Plain functions that forward with `return next_handler(...)` work under
    both drivers:

        def strip_envelope(data, next_handler):
            return next_handler(data["result"])

    Under the async driver a plain function only gets an awaitable back from
    `next_handler`, so it cannot post-process the downstream result; leaving
    that awaitable un-returned raises MiddlewareError.

    Coroutine functions need the async driver and can post-process:

        async def timed(data, next_handler):
            start = time.monotonic()
            result = await next_handler(data)
            record(time.monotonic() - start)
            return result
    """

    def __call__(self, data: Any, next_handler: Next) -> Any | Awaitable[Any]:
        ...


MiddlewareFunc: TypeAlias = Callable[[Any, Next], Any]


def middleware_name(middleware: Any) -> str:
    """Human-readable middleware name for logs and errors."""
    name = getattr(middleware, "__name__", None)
    if name:
        return name
    return middleware.__class__.__name__
