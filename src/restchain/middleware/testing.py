from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .base import Next


class RecordingMiddleware:
    """Mock middleware that records each value it sees, then forwards.

    Several recorders can share one `log` list to capture execution order.
    """

    def __init__(
        self,
        name: str = "recorder",
        log: list[str] | None = None,
        transform: Callable[[Any], Any] | None = None
    ):
        self.__name__ = name
        self.log = log if log is not None else []
        self._transform = transform
        self.call_count = 0
        self.received: list[Any] = []

    def __call__(self, data: Any, next_handler: Next) -> Any:
        self.call_count += 1
        self.received.append(data)
        self.log.append(self.__name__)
        if self._transform is not None:
            data = self._transform(data)
        return next_handler(data)


class AsyncRecordingMiddleware(RecordingMiddleware):
    """Coroutine variant; also records what came back from downstream."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.returned: list[Any] = []

    async def __call__(self, data: Any, next_handler: Next) -> Any:
        self.call_count += 1
        self.received.append(data)
        self.log.append(self.__name__)
        if self._transform is not None:
            data = self._transform(data)
        result = await next_handler(data)
        self.returned.append(result)
        return result


class ShortCircuitMiddleware:
    """Mock middleware that returns a fixed result without calling next_handler."""

    def __init__(self, result: Any, name: str = "short_circuit", log: list[str] | None = None):
        self.__name__ = name
        self.result = result
        self.log = log if log is not None else []
        self.call_count = 0

    def __call__(self, data: Any, next_handler: Next) -> Any:
        self.call_count += 1
        self.log.append(self.__name__)
        return self.result


class FailingMiddleware:
    """Mock middleware that raises the configured exception."""

    def __init__(self, error: Exception, name: str = "failing", log: list[str] | None = None):
        self.__name__ = name
        self.error = error
        self.log = log if log is not None else []
        self.call_count = 0

    def __call__(self, data: Any, next_handler: Next) -> Any:
        self.call_count += 1
        self.log.append(self.__name__)
        raise self.error
