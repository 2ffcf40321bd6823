"""Protocol definitions for pipeline collaborators."""

from dataclasses import dataclass
from typing import Protocol

from ..models import CrawlRecord


@dataclass
class Response:
    """HTTP response container.

    ``content`` is the body as handed over by the client layer: gzip and br
    bodies are still compressed, deflate bodies are already inflated.
    """

    url: str
    status: int
    content: bytes
    headers: dict[str, str]

    @property
    def ok(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.status < 300

    @property
    def content_encoding(self) -> str:
        """Declared Content-Encoding, empty when absent."""
        return self.headers.get("content-encoding", "")


class Fetcher(Protocol):
    """Protocol for URL fetchers."""

    async def fetch(self, url: str) -> Response:
        """Fetch a URL and return the response."""
        ...


class ResultStore(Protocol):
    """Protocol for durable crawl result storage."""

    async def insert(self, record: CrawlRecord) -> None:
        """Store a record."""
        ...

    async def query_top_recent(self, limit: int) -> list[CrawlRecord]:
        """Return up to ``limit`` records, newest crawl first."""
        ...
