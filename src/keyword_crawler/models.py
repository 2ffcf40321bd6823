"""Crawl result records."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import NamedTuple


class Score(NamedTuple):
    """Occurrence count of one keyword."""

    keyword: str
    count: int


@dataclass(frozen=True)
class CrawlRecord:
    """One successful crawl, created once and never mutated."""

    url: str
    keywords: tuple[str, ...]
    scores: tuple[Score, ...]
    raw_html: str
    crawl_time: datetime

    def __post_init__(self):
        # Accept any sequence but always store tuples
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "scores", tuple(Score(*s) for s in self.scores))

        if not self.url:
            raise ValueError("url must not be empty")
        if len(self.scores) != len(self.keywords):
            raise ValueError(
                f"{len(self.scores)} scores for {len(self.keywords)} keywords"
            )
        for keyword, score in zip(self.keywords, self.scores):
            if score.keyword != keyword:
                raise ValueError(f"score for {score.keyword!r} out of order, expected {keyword!r}")
            if score.count < 0:
                raise ValueError(f"negative count for {keyword!r}")

    @property
    def total(self) -> int:
        """Sum of all keyword counts."""
        return sum(s.count for s in self.scores)

    def to_dict(self) -> dict:
        """Convert to a JSON-safe document."""
        return {
            "url": self.url,
            "keywords": list(self.keywords),
            "scores": [{"keyword": s.keyword, "count": s.count} for s in self.scores],
            "html": self.raw_html,
            "crawl_time": self.crawl_time.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CrawlRecord":
        """Build a record from a document produced by to_dict()."""
        crawl_time = datetime.fromisoformat(data["crawl_time"])
        if crawl_time.tzinfo is None:
            crawl_time = crawl_time.replace(tzinfo=timezone.utc)

        return cls(
            url=data["url"],
            keywords=tuple(data["keywords"]),
            scores=tuple(Score(s["keyword"], s["count"]) for s in data["scores"]),
            raw_html=data.get("html", ""),
            crawl_time=crawl_time,
        )
