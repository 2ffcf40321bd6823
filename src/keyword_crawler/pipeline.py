"""Fetch, decode, extract, score and store a single page."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

import httpx

from .core import Fetcher, HttpFetcher, ResultStore, decode
from .errors import (
    CrawlError,
    DecodeError,
    HTTPStatusError,
    NetworkError,
    PersistenceError,
    ValidationError,
)
from .extract import Extractor
from .models import CrawlRecord
from .score import parse_keywords, score

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeywordCrawler:
    """
    Crawl one page per call and persist its keyword scores.

    The fetcher and the store are owned by the caller and shared between
    calls; a crawl keeps no other state, so calls may run concurrently.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: ResultStore,
        fetch_timeout: float = 30.0,
        store_timeout: float = 5.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.fetcher = fetcher
        self.store = store
        self.fetch_timeout = fetch_timeout
        self.store_timeout = store_timeout
        self.clock = clock

    async def crawl(self, url: str, raw_keywords: str) -> CrawlRecord:
        """
        Run the pipeline for ``url``.

        Raises a CrawlError subclass naming the failing stage; nothing is
        stored unless every stage succeeds.
        """
        try:
            return await self._crawl(url, raw_keywords)
        except CrawlError as e:
            logger.error("Crawl of %r failed: %s", url, e)
            raise

    async def _crawl(self, url: str, raw_keywords: str) -> CrawlRecord:
        keywords = self._validate(url, raw_keywords)
        logger.info("Crawling %s for keywords %s", url, keywords)

        response = await self._fetch(url)
        logger.debug("Response headers: %s", response.headers)

        body = decode(response.content, response.content_encoding)

        extractor = Extractor(body)
        extracted = extractor.extract()
        logger.info("Extracted %d chars using %s rule", len(extracted.text), extracted.rule)

        scores = score(extracted.text, keywords)
        for s in scores:
            logger.info("Keyword %r found %d times", s.keyword, s.count)

        record = CrawlRecord(
            url=url,
            keywords=tuple(keywords),
            scores=tuple(scores),
            raw_html=extracted.raw_html,
            crawl_time=self.clock(),
        )
        await self._persist(record)
        logger.info("Saved %s with %d keywords", url, len(keywords))
        logger.info("Page statistics: %s", extractor.stats())

        return record

    def _validate(self, url: str, raw_keywords: str) -> list[str]:
        if not url or not url.strip():
            raise ValidationError("URL is required")

        keywords = parse_keywords(raw_keywords or "")
        if not keywords:
            raise ValidationError("Keywords are required")
        return keywords

    async def _fetch(self, url: str):
        try:
            response = await asyncio.wait_for(self.fetcher.fetch(url), timeout=self.fetch_timeout)

        except asyncio.TimeoutError as e:
            raise NetworkError(f"timed out after {self.fetch_timeout}s fetching {url}", cause=e) from e

        except httpx.DecodingError as e:
            # Deflate bodies are inflated by the client layer
            raise DecodeError(f"failed to decode response body: {e}", cause=e) from e

        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise NetworkError(f"failed to fetch {url}: {e}", cause=e) from e

        logger.info("Response status code: %d", response.status)
        if not response.ok:
            raise HTTPStatusError(response.status, url)
        return response

    async def _persist(self, record: CrawlRecord):
        try:
            await asyncio.wait_for(self.store.insert(record), timeout=self.store_timeout)

        except asyncio.TimeoutError as e:
            raise PersistenceError(f"write timed out after {self.store_timeout}s", cause=e) from e

        except PersistenceError:
            raise

        except Exception as e:
            raise PersistenceError(f"failed to save to database: {e}", cause=e) from e


async def run_crawl(
    url: str,
    raw_keywords: str,
    store: ResultStore,
    timeout: float = 30.0,
    store_timeout: float = 5.0,
    **fetcher_options,
) -> CrawlRecord:
    """Crawl ``url`` with a fresh HTTP client, closing it afterwards."""
    fetcher = HttpFetcher(timeout=timeout, **fetcher_options)
    crawler = KeywordCrawler(fetcher, store, fetch_timeout=timeout, store_timeout=store_timeout)
    try:
        return await crawler.crawl(url, raw_keywords)
    finally:
        await fetcher.close()
