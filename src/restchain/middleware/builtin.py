"""Reusable response middleware.

All of these are plain functions that forward with `return next_handler(...)`,
so they work under both the async and the blocking chain drivers.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .base import Middleware, Next
from .chain import MiddlewareRejection

logger = logging.getLogger(__name__)

SUCCESS_RANGE = range(200, 300)


class ResponseStatusError(MiddlewareRejection):
    """Raised by status_check_middleware for a status outside [200, 300)."""
    def __init__(self, status_code: int, response: Any = None):
        self.status_code = status_code
        self.response = response
        super().__init__("status_check_middleware", f"unexpected status code {status_code}")


class ResponseBodyError(MiddlewareRejection):
    """Raised by error_middleware when a parsed body carries an `error` field."""
    def __init__(self, error: Any, body: Any = None):
        self.error = error
        self.body = body
        super().__init__("error_middleware", str(error))


def parse_error(body: Any) -> Any | None:
    """Return the `error` field of a parsed response body, or None.

    Example:
        parse_error({"error": "hello world"})  # "hello world"
        parse_error({"data": "hello world"})   # None
    """
    if isinstance(body, Mapping):
        return body.get("error")
    return None


def error_middleware(data: Any, next_handler: Next) -> Any:
    """Fail the chain when the parsed body reports an error; forward otherwise.

    Place after json_middleware.

    Raises:
        ResponseBodyError: If parse_error() finds an error
    """
    error = parse_error(data)
    if error is not None:
        raise ResponseBodyError(error, data)
    return next_handler(data)


def json_middleware(data: Any, next_handler: Next) -> Any:
    """Parse the response body as JSON and forward the parsed value.

    Accepts anything with a `.json()` method (httpx.Response) as well as
    raw str/bytes bodies.

    Raises:
        json.JSONDecodeError: If the body is not valid JSON
    """
    if isinstance(data, (str, bytes, bytearray)):
        parsed = json.loads(data)
    else:
        parsed = data.json()
    return next_handler(parsed)


def status_check_middleware(data: Any, next_handler: Next) -> Any:
    """Forward responses with a 2xx status; fail the chain otherwise.

    Reads `status_code` (httpx) or `status`.

    Raises:
        ResponseStatusError: If the status is outside [200, 300)
        TypeError: If the value carries no status field
    """
    status = getattr(data, "status_code", None)
    if status is None:
        status = getattr(data, "status", None)
    if status is None:
        raise TypeError(f"status_check_middleware needs a response with a status, got {type(data).__name__}")

    if status not in SUCCESS_RANGE:
        raise ResponseStatusError(status, data)
    return next_handler(data)


def make_logging_middleware(
    log: logging.Logger | None = None,
    level: int = logging.INFO
) -> Middleware:
    """Create a middleware that logs the value passing through and forwards it unchanged.

    Args:
        log: Logger to write to (defaults to this module's logger)
        level: Log level for the message

    Returns:
        Middleware function named `logging_middleware`
    """
    target = log or logger

    def logging_middleware(data: Any, next_handler: Next) -> Any:
        target.log(level, f"Middleware received: {_describe(data)}")
        return next_handler(data)

    return logging_middleware


def _describe(data: Any) -> str:
    status = getattr(data, "status_code", None)
    if status is not None:
        try:
            request = data.request
        except (AttributeError, RuntimeError):
            # httpx raises RuntimeError for responses built without a request
            return f"response {status}"
        return f"{request.method} {request.url} -> {status}"
    text = repr(data)
    return text if len(text) <= 200 else text[:197] + "..."


logging_middleware = make_logging_middleware()
