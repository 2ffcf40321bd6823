"""Keyword parsing and occurrence scoring."""

from collections.abc import Sequence

from .models import Score


def parse_keywords(raw: str) -> list[str]:
    """
    Split a comma-separated keyword string.

    Entries are trimmed and lower-cased; empty entries are dropped.
    Order and duplicates are kept.
    """
    keywords = []
    for part in raw.split(","):
        keyword = part.strip().lower()
        if keyword:
            keywords.append(keyword)
    return keywords


def count_occurrences(text: str, keyword: str) -> int:
    """Count non-overlapping occurrences, scanning left to right."""
    if not keyword:
        return 0
    return text.count(keyword)


def score(text: str, keywords: Sequence[str]) -> list[Score]:
    """Score lower-cased text against each keyword, in keyword order."""
    lowered = text.lower()
    return [Score(keyword, count_occurrences(lowered, keyword.lower())) for keyword in keywords]
