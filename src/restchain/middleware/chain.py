from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import Any, TYPE_CHECKING

from .base import middleware_name

if TYPE_CHECKING:
    from .base import Middleware, Next

logger = logging.getLogger(__name__)


class MiddlewareError(Exception):
    """Raised when middleware misuses the chain (double next call, async under sync driver)."""
    def __init__(self, middleware_name: str, reason: str):
        self.middleware_name = middleware_name
        self.reason = reason
        super().__init__(f"Middleware {middleware_name} failed: {reason}")


class MiddlewareRejection(Exception):
    """Raised when middleware deliberately fails the chain instead of forwarding."""
    def __init__(self, middleware_name: str, reason: str | None):
        self.middleware_name = middleware_name
        self.reason = reason
        super().__init__(f"Rejected by {middleware_name}: {reason}")


class MiddlewareChain:
    """Drives an ordered middleware sequence over one value by continuation passing.

    Middleware run strictly in the order given; the chain never sorts,
    deduplicates or skips entries. Each middleware gets the current value
    and a `next_handler` bound to its own position, so calling it always
    advances to the following entry. The chain result is whatever the first
    middleware returns, which, when everyone forwards, is the value handed
    to the last continuation. An empty chain returns the initial value.

    The sequence is snapshotted at construction; mutating the source list
    afterwards does not affect a built chain.

    Example:
        chain = MiddlewareChain.concat(handle_middleware, call_middleware)
        result = await chain.execute(response)
    """

    def __init__(self, middlewares: Iterable["Middleware"] = ()):
        self.middlewares: tuple["Middleware", ...] = tuple(middlewares)

    @classmethod
    def concat(
        cls,
        handle_level: Iterable["Middleware"],
        call_level: Iterable["Middleware"] = ()
    ) -> "MiddlewareChain":
        """Build the effective chain for one call: handle-level first, then call-level.

        Neither input is modified.
        """
        return cls((*handle_level, *call_level))

    def __len__(self) -> int:
        return len(self.middlewares)

    def __repr__(self) -> str:
        names = ", ".join(middleware_name(m) for m in self.middlewares)
        return f"MiddlewareChain([{names}])"

    async def execute(self, initial_value: Any) -> Any:
        """Run the chain, awaiting middleware that return awaitables.

        Continuations return awaitables here, so coroutine middleware can
        `await next_handler(value)` and plain middleware can
        `return next_handler(value)`. A continuation that was called but
        whose awaitable was neither awaited nor returned fails the chain,
        since downstream middleware would otherwise be skipped silently.

        Args:
            initial_value: Starting value, usually the raw response

        Returns:
            The chain result

        Raises:
            MiddlewareError: If a continuation is called more than once or
                its result is left un-awaited
            Exception: Anything raised by a middleware, unchanged
        """
        if not self.middlewares:
            return initial_value

        reported: set[int] = set()

        async def dispatch(index: int, value: Any) -> Any:
            if index >= len(self.middlewares):
                return value

            middleware = self.middlewares[index]
            name = middleware_name(middleware)
            logger.debug("middleware_invoked", extra={"middleware": name, "index": index})

            pending: list[_PendingNext] = []

            def advance(next_index: int, next_value: Any) -> _PendingNext:
                step = _PendingNext(dispatch(next_index, next_value))
                pending.append(step)
                return step

            try:
                result = middleware(value, self._continuation(index, advance))
                if inspect.isawaitable(result):
                    result = await result
                if pending and not pending[0].awaited:
                    raise MiddlewareError(name, "next_handler result was not awaited")
            except Exception as e:
                for step in pending:
                    if not step.awaited:
                        step.close()
                self._report_failure(index, e, reported)
                raise
            return result

        return await dispatch(0, initial_value)

    def execute_sync(self, initial_value: Any) -> Any:
        """Run the chain without an event loop.

        Continuations return the downstream result directly. Middleware that
        produce an awaitable are rejected with MiddlewareError.

        Args:
            initial_value: Starting value, usually the raw response

        Returns:
            The chain result

        Raises:
            MiddlewareError: On async middleware or a repeated continuation call
            Exception: Anything raised by a middleware, unchanged
        """
        if not self.middlewares:
            return initial_value

        reported: set[int] = set()

        def dispatch(index: int, value: Any) -> Any:
            if index >= len(self.middlewares):
                return value

            middleware = self.middlewares[index]
            name = middleware_name(middleware)
            logger.debug("middleware_invoked", extra={"middleware": name, "index": index})
            try:
                result = middleware(value, self._continuation(index, dispatch))
                if inspect.isawaitable(result):
                    _discard(result)
                    raise MiddlewareError(
                        name, "returned an awaitable; async middleware need the async API"
                    )
            except Exception as e:
                self._report_failure(index, e, reported)
                raise
            return result

        return dispatch(0, initial_value)

    def _continuation(self, index: int, dispatch: Callable[[int, Any], Any]) -> "Next":
        name = middleware_name(self.middlewares[index])
        called = False

        def next_handler(value: Any) -> Any:
            nonlocal called
            if called:
                raise MiddlewareError(name, "next_handler called more than once")
            called = True
            return dispatch(index + 1, value)

        return next_handler

    def _report_failure(self, index: int, error: Exception, reported: set[int]) -> None:
        """Log a failure once, at the middleware it escaped from first."""
        if id(error) in reported:
            return
        reported.add(id(error))

        name = middleware_name(self.middlewares[index])
        if isinstance(error, MiddlewareRejection):
            logger.info(
                "middleware_rejected",
                extra={"middleware": name, "index": index, "reason": error.reason},
            )
        else:
            logger.error(
                "middleware_error",
                extra={"middleware": name, "index": index, "error": str(error)},
            )


class _PendingNext:
    """Awaitable returned by async continuations; remembers whether it was awaited."""

    __slots__ = ("_coro", "awaited")

    def __init__(self, coro: Any):
        self._coro = coro
        self.awaited = False

    def __await__(self):
        self.awaited = True
        return self._coro.__await__()

    def close(self) -> None:
        self._coro.close()


def _discard(awaitable: Any) -> None:
    close = getattr(awaitable, "close", None)
    if close is not None:
        close()
