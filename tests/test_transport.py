"""Tests for the one-shot transport and single-attempt dispatch."""

import ssl
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest

from svcutils.errors import SendError, TlsBootstrapError
from svcutils.http import (
    OneShotTransport,
    RequestSpec,
    authority_of,
    dial_address,
    dispatch,
    native_ssl_context,
)


class TestAddresses:
    """Tests for authority and dial address helpers."""

    def test_authority_is_lowercased(self):
        """Test the cookie key of a URL."""
        assert authority_of("http://Host.Example:8080/path") == "host.example:8080"

    def test_dial_address_substitutes_localhost(self):
        """Test that localhost is dialed as 127.0.0.1."""
        assert dial_address("http://localhost:8080/x") == "127.0.0.1:8080"

    def test_dial_address_default_ports(self):
        """Test default ports per scheme."""
        assert dial_address("http://h/") == "h:80"
        assert dial_address("https://h/") == "h:443"

    def test_dial_address_keeps_similar_hosts(self):
        """Test that only the exact localhost name is substituted."""
        assert dial_address("http://localhost.example/") == "localhost.example:80"


class TestOneShotTransport:
    """Tests for OneShotTransport."""

    @pytest.mark.asyncio
    async def test_localhost_dialed_as_loopback(self):
        """Test the URL rewrite while the Host header stays untouched."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        transport = OneShotTransport(tls=False)
        transport._inner = httpx.MockTransport(handler)

        request = httpx.Request("GET", "http://localhost:8080/ping")
        response = await transport.handle_async_request(request)

        assert response.status_code == 204
        assert seen[0].url.host == "127.0.0.1"
        assert seen[0].headers["host"] == "localhost:8080"


class TestNativeSslContext:
    """Tests for the shared TLS context."""

    def setup_method(self):
        native_ssl_context.cache_clear()

    def teardown_method(self):
        native_ssl_context.cache_clear()

    def test_built_once(self):
        """Test that the context is created once and reused."""
        paths = ssl.get_default_verify_paths()
        if paths.cafile is None and paths.capath is None:
            pytest.skip("platform has no default trust store")

        ctx = native_ssl_context()

        assert ctx is native_ssl_context()
        assert ctx.minimum_version == ssl.TLSVersion.TLSv1_2
        assert ctx.verify_mode == ssl.CERT_REQUIRED

    def test_missing_roots(self):
        """Test the distinct error for a platform without root certificates."""
        paths = SimpleNamespace(
            cafile=None,
            capath=None,
            openssl_cafile="/nowhere/cert.pem",
            openssl_capath="/nowhere/certs",
        )
        ctx = MagicMock()
        ctx.cert_store_stats.return_value = {"x509_ca": 0}

        with (
            patch("svcutils.http._transport.ssl.get_default_verify_paths", return_value=paths),
            patch("svcutils.http._transport.ssl.create_default_context", return_value=ctx),
        ):
            with pytest.raises(TlsBootstrapError):
                native_ssl_context()


class TestDispatch:
    """Tests for dispatch on its own."""

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_send_error(self, cookie_store):
        """Test that transport failures carry the dialed address."""

        def handler(request):
            raise httpx.ReadError("reset", request=request)

        spec = RequestSpec("GET", "http://localhost:7000/")

        with pytest.raises(SendError) as exc_info:
            await dispatch(
                spec,
                cookie_store=cookie_store,
                timeout_s=1.0,
                transport=httpx.MockTransport(handler),
            )

        assert exc_info.value.target == "127.0.0.1:7000"

    @pytest.mark.asyncio
    async def test_body_is_read_raw(self, cookie_store):
        """Test that compressed bodies are not decoded."""
        payload = b"\x1f\x8b\x08\x00not-really-gzip"
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(payload),
            )
        )

        result = await dispatch(
            RequestSpec("GET", "http://h/"),
            cookie_store=cookie_store,
            timeout_s=1.0,
            transport=transport,
        )

        assert result.body == payload

    @pytest.mark.asyncio
    async def test_cookie_refresh_then_redirect(self, make_transport, cookie_store):
        """Test that a cookie refresh and a redirect both happen in one attempt."""

        def handler(request):
            if "cookie" not in request.headers:
                return httpx.Response(200, headers={"Set-Cookie": "s=1"})
            if request.url.path == "/start":
                return httpx.Response(302, headers={"Location": "/end"})
            return httpx.Response(200, content=b"end")

        transport = make_transport(handler)

        result = await dispatch(
            RequestSpec("GET", "http://h/start"),
            cookie_store=cookie_store,
            timeout_s=1.0,
            transport=transport,
        )

        assert result.body == b"end"
        assert transport.paths == ["/start", "/start", "/end"]
        assert transport.requests[2].headers["cookie"] == "s=1"

    @pytest.mark.asyncio
    async def test_unparseable_location_ignored(self, cookie_store):
        """Test that a Location that is not an http(s) URL is not followed."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(301, headers={"Location": "mailto:x@y"})
        )

        result = await dispatch(
            RequestSpec("GET", "http://h/"),
            cookie_store=cookie_store,
            timeout_s=1.0,
            transport=transport,
        )

        assert result.status == 301
