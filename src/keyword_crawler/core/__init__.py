"""Core crawler components."""

from .decoder import decode
from .fetcher import DEFAULT_HEADERS, HttpFetcher
from .protocols import Fetcher, Response, ResultStore

__all__ = ["DEFAULT_HEADERS", "Fetcher", "HttpFetcher", "Response", "ResultStore", "decode"]
