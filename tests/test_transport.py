"""Unit tests for HttpxTransport and TransportConfig."""

import httpx
import pytest

from restchain.config import Settings
from restchain.request import RequestOptions, RestMethod
from restchain.transport import HttpxTransport, Transport, TransportConfig


class TestTransportConfig:
    """Test TransportConfig validation"""

    def test_defaults(self):
        config = TransportConfig()
        assert config.default_timeout == 60.0
        assert config.follow_redirects is True

    @pytest.mark.parametrize("field", ["default_timeout", "connect_timeout", "write_timeout", "pool_timeout"])
    def test_non_positive_timeout_rejected(self, field):
        """Test each timeout must be > 0"""
        with pytest.raises(ValueError, match=f"{field} must be > 0"):
            TransportConfig(**{field: 0})

    def test_from_settings(self):
        """Test config is derived from Settings"""
        settings = Settings(timeout=12.0, connect_timeout=3.0, follow_redirects=False, verify_ssl=False)
        config = TransportConfig.from_settings(settings)

        assert config.default_timeout == 12.0
        assert config.connect_timeout == 3.0
        assert config.follow_redirects is False
        assert config.verify is False

    def test_build_timeout(self):
        timeout = TransportConfig(default_timeout=30.0, connect_timeout=2.0).build_timeout()
        assert timeout.read == 30.0
        assert timeout.connect == 2.0


class TestHttpxTransport:
    """Test HttpxTransport request handling"""

    def test_satisfies_protocol(self):
        assert isinstance(HttpxTransport(), Transport)

    def test_perform_sends_method_headers_body(self):
        """Test the blocking path sends exactly what the options describe"""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, text="created")

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        options = RequestOptions(RestMethod.POST, {"X-Test": "1"}, '{"a": 1}')

        response = transport.perform("https://api.example.com/items", options)

        assert response.status_code == 201
        assert response.text == "created"
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "https://api.example.com/items"
        assert seen[0].headers["X-Test"] == "1"
        assert seen[0].content == b'{"a": 1}'

    @pytest.mark.asyncio
    async def test_aperform_uses_async_client(self):
        """Test the async path sends the request and returns the response"""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        transport = HttpxTransport(transport=httpx.MockTransport(handler))

        response = await transport.aperform(
            "https://api.example.com/items", RequestOptions(RestMethod.GET)
        )

        assert response.json() == {"ok": True}
        assert seen[0].method == "GET"
        await transport.aclose()

    def test_transport_error_propagates(self):
        """Test network failures surface unchanged"""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError, match="connection refused"):
            transport.perform("https://api.example.com/", RequestOptions(RestMethod.GET))

    def test_close(self):
        """Test a closed transport refuses further requests"""
        transport = HttpxTransport(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        transport.close()

        with pytest.raises(RuntimeError, match="closed"):
            transport.perform("https://api.example.com/", RequestOptions(RestMethod.GET))

    @pytest.mark.asyncio
    async def test_aclose(self):
        """Test an async-closed transport refuses further async requests"""
        transport = HttpxTransport(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        await transport.aclose()

        with pytest.raises(RuntimeError, match="closed"):
            await transport.aperform("https://api.example.com/", RequestOptions(RestMethod.GET))
