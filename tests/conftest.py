"""Pytest fixtures and configuration for restchain tests"""

import httpx
import pytest

from restchain.api import Api
from restchain.transport import HttpxTransport

BASE_URL = "https://api.example.com"


@pytest.fixture
def sent_requests():
    """Requests captured by the mock transport, in send order"""
    return []


@pytest.fixture
def make_transport(sent_requests):
    """Build an HttpxTransport backed by httpx.MockTransport.

    The handler receives each httpx.Request; without one every request gets
    a 200 response with body {"ok": true}.
    """
    def _make(handler=None):
        def record(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(200, json={"ok": True})

        return HttpxTransport(transport=httpx.MockTransport(record))

    return _make


@pytest.fixture
def make_api(make_transport):
    """Build an Api against BASE_URL that talks to the mock transport"""
    def _make(*middleware, handler=None, auth=None, headers=None, base_url=BASE_URL):
        return Api(base_url, auth, headers, *middleware, transport=make_transport(handler))

    return _make
