"""JSON Lines export of crawl records."""

import json
from collections.abc import Iterable
from pathlib import Path

from .models import CrawlRecord


def record_line(record: CrawlRecord, include_html: bool = True) -> str:
    """
    Serialize one record as a single JSON line.

    Scores are written as a keyword -> count list in keyword order, with the
    total alongside so exported files can be ranked without re-scoring.
    """
    line = {
        "url": record.url,
        "crawl_time": record.crawl_time.isoformat(),
        "total": record.total,
        "scores": [[s.keyword, s.count] for s in record.scores],
    }
    if include_html:
        line["html"] = record.raw_html
    return json.dumps(line, ensure_ascii=False)


def export_records(
    records: Iterable[CrawlRecord],
    output_path: str | Path,
    include_html: bool = True,
) -> int:
    """Write records to ``output_path``, one per line. Returns the number written."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with path.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(record_line(record, include_html) + "\n")
            written += 1
    return written
