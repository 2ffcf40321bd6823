"""Fetch a page, score it against keywords, keep the result."""

__version__ = "0.1.0"
