"""Request construction helpers: URL resolution, body serialization, header merging."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

HeadersType = Mapping[str, str] | Sequence[tuple[str, str]]
QueryParams = Mapping[str, Any] | Sequence[tuple[str, Any]]


class RestMethod(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestOptions:
    """Everything the transport needs besides the URL."""
    method: RestMethod
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


def build_url(base_url: str | httpx.URL, path: str, params: QueryParams | None = None) -> httpx.URL:
    """Resolve a relative path against the base URL and append query params.

    Resolution follows RFC 3986, so an absolute path replaces the base path:

        build_url("https://api.example.com/v1/", "items")   -> https://api.example.com/v1/items
        build_url("https://api.example.com/v1/", "/items")  -> https://api.example.com/items
        build_url("https://api.example.com", "/abc/1", {"name": "John"})
            -> https://api.example.com/abc/1?name=John

    Args:
        base_url: Absolute base URL of the service
        path: Endpoint path relative to base_url
        params: Optional query params, appended after any already in path

    Returns:
        Absolute httpx.URL
    """
    url = httpx.URL(base_url).join(path)
    if not params:
        return url

    items = params.items() if isinstance(params, Mapping) else params
    for key, value in items:
        url = url.copy_add_param(key, value)
    return url


def serialize_body(payload: Any) -> str:
    """Serialize a request payload as a JSON string."""
    return json.dumps(payload)


def merge_headers(*header_sets: HeadersType | None) -> dict[str, str]:
    """Merge header sets left to right into a new dict.

    A later header replaces an earlier one with the same name, compared
    case-insensitively; the later spelling is kept.
    """
    merged: dict[str, str] = {}
    for headers in header_sets:
        if not headers:
            continue
        items = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in items:
            for existing in [key for key in merged if key.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged
