"""Shared fixtures: a mock HTTP server and a recording store."""

import asyncio

import httpx
import pytest

from keyword_crawler.core import HttpFetcher


def html_response(status: int = 200, body: bytes = b"", headers: dict | None = None) -> httpx.Response:
    """Build a response whose body httpx has not read or decoded yet."""
    return httpx.Response(status, headers=headers or {}, stream=httpx.ByteStream(body))


class MockServer:
    """Serves canned responses by URL and records every request."""

    def __init__(self):
        self.routes: dict[str, tuple] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, status: int = 200, body: bytes = b"", headers: dict | None = None):
        self.routes[url] = (status, body, headers)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return html_response(404, b"not found")
        status, body, headers = route
        return html_response(status, body, headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class RecordingStore:
    """In-memory store that remembers inserted records."""

    def __init__(self, fail_with: Exception | None = None, delay: float = 0.0):
        self.records = []
        self.fail_with = fail_with
        self.delay = delay

    async def insert(self, record):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.records.append(record)

    async def query_top_recent(self, limit):
        return sorted(self.records, key=lambda r: r.crawl_time, reverse=True)[:limit]


@pytest.fixture
def server():
    return MockServer()


@pytest.fixture
async def fetcher(server):
    fetcher = HttpFetcher(timeout=5.0, transport=server.transport)
    yield fetcher
    await fetcher.close()


@pytest.fixture
def store():
    return RecordingStore()
