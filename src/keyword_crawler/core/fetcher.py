"""HTTP fetcher implementation using httpx."""

import asyncio

import httpx

from .protocols import Response

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.5"

DEFAULT_HEADERS = {
    "User-Agent": DEFAULT_USER_AGENT,
    "Accept": DEFAULT_ACCEPT,
    "Accept-Language": DEFAULT_ACCEPT_LANGUAGE,
    "Accept-Encoding": "gzip, deflate, br",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


class HttpFetcher:
    """Async HTTP fetcher using httpx with connection reuse."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        accept: str = DEFAULT_ACCEPT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.headers = {
            **DEFAULT_HEADERS,
            "User-Agent": user_agent,
            "Accept": accept,
            "Accept-Language": accept_language,
        }
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self.transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self.timeout,
                        limits=self.limits,
                        headers=self.headers,
                        follow_redirects=True,
                        transport=self.transport,
                    )
        return self._client

    async def fetch(self, url: str) -> Response:
        """
        Fetch a URL and return the response.

        The body of a non-2xx response is never read. A deflate body is
        inflated by httpx here; gzip and br bodies are returned raw for the
        transport decoder.
        """
        client = await self._get_client()
        async with client.stream("GET", url) as resp:
            encoding = resp.headers.get("content-encoding", "").strip().lower()
            if not resp.is_success:
                content = b""
            elif encoding == "deflate":
                content = await resp.aread()
            else:
                content = b"".join([chunk async for chunk in resp.aiter_raw()])

            return Response(
                url=str(resp.url),
                status=resp.status_code,
                content=content,
                headers=dict(resp.headers),
            )

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
