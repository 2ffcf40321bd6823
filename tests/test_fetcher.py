"""Tests for HttpFetcher."""

import gzip
import zlib

import httpx

from keyword_crawler.core import DEFAULT_HEADERS, HttpFetcher, Response

PAGE = b"<html><body><p>Hello fox</p></body></html>"


class TestHttpFetcher:
    async def test_sends_browser_headers(self, server, fetcher):
        """Requests should carry the browser-like header set."""
        server.add("https://example.com/page", body=PAGE)
        await fetcher.fetch("https://example.com/page")

        request = server.requests[0]
        assert request.method == "GET"
        assert request.headers["user-agent"].startswith("Mozilla/5.0")
        assert request.headers["accept"].startswith("text/html")
        assert request.headers["accept-language"] == "en-US,en;q=0.5"
        assert request.headers["accept-encoding"] == "gzip, deflate, br"
        assert request.headers["connection"] == "keep-alive"
        assert request.headers["upgrade-insecure-requests"] == "1"

    async def test_custom_user_agent(self, server):
        server.add("https://example.com/page", body=PAGE)
        fetcher = HttpFetcher(user_agent="TestAgent/1.0", transport=server.transport)
        try:
            await fetcher.fetch("https://example.com/page")
        finally:
            await fetcher.close()

        assert server.requests[0].headers["user-agent"] == "TestAgent/1.0"

    async def test_returns_response_fields(self, server, fetcher):
        """Verify all response fields are populated."""
        server.add("https://example.com/page", body=PAGE, headers={"Content-Type": "text/html"})
        response = await fetcher.fetch("https://example.com/page")

        assert isinstance(response, Response)
        assert response.url == "https://example.com/page"
        assert response.status == 200
        assert response.content == PAGE
        assert response.headers["content-type"] == "text/html"

    async def test_gzip_body_is_left_compressed(self, server, fetcher):
        """gzip bodies are handed over raw for the transport decoder."""
        compressed = gzip.compress(PAGE)
        server.add("https://example.com/page", body=compressed, headers={"Content-Encoding": "gzip"})
        response = await fetcher.fetch("https://example.com/page")

        assert response.content == compressed
        assert response.content_encoding == "gzip"

    async def test_deflate_body_is_inflated_by_client(self, server, fetcher):
        """deflate bodies are inflated by the client layer."""
        server.add(
            "https://example.com/page",
            body=zlib.compress(PAGE),
            headers={"Content-Encoding": "deflate"},
        )
        response = await fetcher.fetch("https://example.com/page")

        assert response.content == PAGE
        assert response.content_encoding == "deflate"

    async def test_non_success_body_is_not_read(self, server, fetcher):
        """The body of an error response is discarded."""
        server.add("https://example.com/missing", status=404, body=b"<h1>Not Found</h1>")
        response = await fetcher.fetch("https://example.com/missing")

        assert response.status == 404
        assert response.content == b""
        assert not response.ok

    async def test_follows_redirects(self, server, fetcher):
        """Verify redirects are followed."""
        server.add("https://example.com/old", status=301, headers={"Location": "https://example.com/new"})
        server.add("https://example.com/new", body=PAGE)
        response = await fetcher.fetch("https://example.com/old")

        assert response.url == "https://example.com/new"
        assert response.status == 200
        assert response.content == PAGE

    async def test_reuses_client(self, server, fetcher):
        server.add("https://example.com/page", body=PAGE)
        await fetcher.fetch("https://example.com/page")
        client = fetcher._client
        await fetcher.fetch("https://example.com/page")
        assert fetcher._client is client

    async def test_close_resets_client(self, server, fetcher):
        server.add("https://example.com/page", body=PAGE)
        await fetcher.fetch("https://example.com/page")
        await fetcher.close()
        assert fetcher._client is None


class TestDefaultHeaders:
    def test_accept_encoding_advertises_all_decoders(self):
        assert DEFAULT_HEADERS["Accept-Encoding"] == "gzip, deflate, br"


class TestResponse:
    def test_ok_for_2xx(self):
        assert Response("https://example.com", 200, b"", {}).ok
        assert Response("https://example.com", 204, b"", {}).ok
        assert not Response("https://example.com", 301, b"", {}).ok
        assert not Response("https://example.com", 500, b"", {}).ok

    def test_content_encoding_defaults_to_empty(self):
        assert Response("https://example.com", 200, b"", {}).content_encoding == ""

    def test_timeout_is_httpx_timeout(self):
        fetcher = HttpFetcher(timeout=30.0)
        assert isinstance(fetcher.timeout, httpx.Timeout)
        assert fetcher.timeout.read == 30.0
