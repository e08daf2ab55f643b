"""
Tests for the HTTP fetcher.

Uses httpx.MockTransport; no network access.
"""
from __future__ import annotations

import httpx
import pytest
from tenacity import wait_none

from casync_http.errors import TransferAborted, TransportError
from casync_http.mappers import exit_code_for
from casync_http.settings import DEFAULT_USER_AGENT, Settings
from casync_http.transport import HttpFetcher
from tests.helpers.store_server import FakeHttpServer


class CollectingSink:
    def __init__(self):
        self.data = bytearray()

    def __call__(self, data: bytes) -> int:
        self.data += data
        return len(data)


class TestFetch:
    """Test HttpFetcher.fetch()."""

    def test_200_streams_body(self, server, fetcher):
        server.routes["http://h/x.caidx"] = (200, b"index bytes")
        sink = CollectingSink()
        assert fetcher.fetch("http://h/x.caidx", sink) == 200
        assert bytes(sink.data) == b"index bytes"

    def test_non_200_body_discarded(self, server, fetcher):
        """Test error pages never reach the sink."""
        server.routes["http://h/x.caidx"] = (503, b"<html>busy</html>")
        sink = CollectingSink()
        assert fetcher.fetch("http://h/x.caidx", sink) == 503
        assert sink.data == b""

    def test_not_found(self, fetcher):
        sink = CollectingSink()
        assert fetcher.fetch("http://h/missing", sink) == 404
        assert sink.data == b""

    def test_redirects_followed(self, server, fetcher):
        server.routes["http://h/old"] = lambda request: httpx.Response(
            302, headers={"Location": "http://h/new"}
        )
        server.routes["http://h/new"] = (200, b"moved")
        sink = CollectingSink()
        assert fetcher.fetch("http://h/old", sink) == 200
        assert bytes(sink.data) == b"moved"
        assert server.requests == ["http://h/old", "http://h/new"]

    def test_sink_abort_propagates(self, server, fetcher):
        server.routes["http://h/x"] = (200, b"data")

        def refusing_sink(data: bytes) -> int:
            raise TransferAborted("no thanks")

        with pytest.raises(TransferAborted, match="no thanks"):
            fetcher.fetch("http://h/x", refusing_sink)

    def test_connection_error_is_transport_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = HttpFetcher(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError, match="Failed to acquire http://h/x") as exc_info:
            fetcher.fetch("http://h/x", CollectingSink())
        assert exc_info.value.url == "http://h/x"

    @pytest.mark.parametrize("url", ["http://h/s\x00x", "http://" + "a" * 70000 + "/x"], ids=["nul-byte", "long-host"])
    def test_invalid_url_is_transport_error(self, server, fetcher, url, caplog):
        """Test URLs httpx cannot parse fail like any other transfer."""
        with pytest.raises(TransportError, match="Failed to acquire") as exc_info:
            fetcher.fetch(url, CollectingSink())
        assert exc_info.value.url == url
        assert exit_code_for(exc_info.value) == 3
        assert "Failed to acquire" in caplog.text
        assert server.requests == []

    def test_logs_acquiring_url(self, server, fetcher, caplog):
        caplog.set_level("INFO", logger="casync_http")
        server.routes["http://h/x"] = (200, b"")
        fetcher.fetch("http://h/x", CollectingSink())
        assert "Acquiring http://h/x..." in caplog.text


class TestRetry:
    """Test connection retries."""

    def _flaky_server(self, failures: int) -> FakeHttpServer:
        server = FakeHttpServer()
        attempts = {"n": 0}

        def handler(request):
            attempts["n"] += 1
            if attempts["n"] <= failures:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, content=b"ok")

        server.routes["http://h/x"] = handler
        return server

    def test_retries_connection_errors(self):
        server = self._flaky_server(failures=2)
        fetcher = HttpFetcher(Settings(http_retry=2), client=server.client())
        fetcher._wait = wait_none()

        sink = CollectingSink()
        assert fetcher.fetch("http://h/x", sink) == 200
        assert bytes(sink.data) == b"ok"
        assert len(server.requests) == 3

    def test_gives_up_after_retries(self):
        server = self._flaky_server(failures=5)
        fetcher = HttpFetcher(Settings(http_retry=1), client=server.client())
        fetcher._wait = wait_none()

        with pytest.raises(TransportError):
            fetcher.fetch("http://h/x", CollectingSink())
        assert len(server.requests) == 2

    def test_no_retry_by_default(self, settings):
        server = self._flaky_server(failures=1)
        fetcher = HttpFetcher(settings, client=server.client())

        with pytest.raises(TransportError):
            fetcher.fetch("http://h/x", CollectingSink())
        assert len(server.requests) == 1


class TestClient:
    """Test the default httpx client configuration."""

    def test_default_client(self, settings):
        with HttpFetcher(settings) as fetcher:
            assert fetcher.client.follow_redirects is True
            assert fetcher.client.headers["User-Agent"] == DEFAULT_USER_AGENT
            assert fetcher.client.timeout.read is None
            assert fetcher.client.timeout.connect is None

    def test_configured_timeout(self):
        with HttpFetcher(Settings(http_timeout_s=5.0)) as fetcher:
            assert fetcher.client.timeout.read == 5.0
