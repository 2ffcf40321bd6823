"""Errors raised by the crawl pipeline, one per failing stage."""


class CrawlError(Exception):
    """Base class for every terminal crawl failure."""

    stage = "crawl"

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"


class ValidationError(CrawlError):
    """Missing or unusable input."""

    stage = "validate"


class NetworkError(CrawlError):
    """The request could not complete."""

    stage = "fetch"


class HTTPStatusError(CrawlError):
    """The server answered with a non-2xx status."""

    stage = "fetch"

    def __init__(self, status_code: int, url: str):
        super().__init__(f"status code {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class DecodeError(CrawlError):
    """The transport-encoded body could not be decompressed."""

    stage = "decode"


class ParseError(CrawlError):
    """The document could not be parsed as HTML."""

    stage = "extract"


class PersistenceError(CrawlError):
    """The record could not be written to the store."""

    stage = "persist"
