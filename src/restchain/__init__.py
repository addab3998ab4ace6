"""restchain - REST API handles with composable response middleware.

Create one Api per backend service, bound to a base URL and an auth
strategy; every response runs through the handle's middleware followed by
any middleware passed to the individual call.
"""

from .api import Api
from .auth import Auth, AuthKind
from .middleware import (
    MiddlewareChain,
    MiddlewareError,
    MiddlewareRejection,
    ResponseBodyError,
    ResponseStatusError,
    error_middleware,
    json_middleware,
    logging_middleware,
    make_logging_middleware,
    parse_error,
    status_check_middleware,
)
from .request import RequestOptions, RestMethod
from .transport import HttpxTransport, Transport, TransportConfig

__all__ = [
    "Api",
    "Auth",
    "AuthKind",
    "HttpxTransport",
    "MiddlewareChain",
    "MiddlewareError",
    "MiddlewareRejection",
    "RequestOptions",
    "ResponseBodyError",
    "ResponseStatusError",
    "RestMethod",
    "Transport",
    "TransportConfig",
    "error_middleware",
    "json_middleware",
    "logging_middleware",
    "make_logging_middleware",
    "parse_error",
    "status_check_middleware",
]
