"""Response middleware for restchain.

A middleware is any callable `(data, next_handler) -> result`. Handle-level
and call-level middleware are concatenated per call and driven by
MiddlewareChain. Built-ins:
- json_middleware: parse the response body as JSON
- status_check_middleware: fail the chain on non-2xx responses
- error_middleware: fail the chain when the parsed body has an `error` field
- logging_middleware: log and forward unchanged
"""

from .base import (
    Middleware,
    MiddlewareFunc,
    Next,
    middleware_name,
)
from .chain import (
    MiddlewareChain,
    MiddlewareError,
    MiddlewareRejection,
)
from .builtin import (
    ResponseBodyError,
    ResponseStatusError,
    error_middleware,
    json_middleware,
    logging_middleware,
    make_logging_middleware,
    parse_error,
    status_check_middleware,
)

__all__ = [
    # Contract
    "Middleware",
    "MiddlewareFunc",
    "Next",
    "middleware_name",
    # Chain executor
    "MiddlewareChain",
    "MiddlewareError",
    "MiddlewareRejection",
    # Built-ins
    "ResponseBodyError",
    "ResponseStatusError",
    "error_middleware",
    "json_middleware",
    "logging_middleware",
    "make_logging_middleware",
    "parse_error",
    "status_check_middleware",
]
