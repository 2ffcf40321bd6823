"""SQLite-backed crawl result store."""

import asyncio
import json
import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path

from .errors import PersistenceError
from .models import CrawlRecord, Score

logger = logging.getLogger(__name__)


class SQLiteResultStore:
    """
    Crawl records in a single SQLite connection.

    Safe for concurrent crawls: blocking calls run in a worker thread and
    access to the connection is serialized by a lock.
    """

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        self._lock = threading.Lock()
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._init_db()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open database {self.db_path}: {e}", cause=e) from e

    def _init_db(self):
        """Initialize SQLite tables."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS pages (
                id INTEGER PRIMARY KEY,
                url TEXT NOT NULL,
                keywords TEXT NOT NULL,
                scores TEXT NOT NULL,
                html TEXT NOT NULL,
                crawl_time REAL NOT NULL
            )
        """)
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_crawl_time ON pages(crawl_time DESC)")
        self.conn.commit()

    def _insert(self, record: CrawlRecord, cancelled: threading.Event):
        with self._lock:
            if cancelled.is_set():
                return
            try:
                with self.conn:
                    self.conn.execute(
                        """INSERT INTO pages (url, keywords, scores, html, crawl_time)
                           VALUES (?, ?, ?, ?, ?)""",
                        (
                            record.url,
                            json.dumps(list(record.keywords), ensure_ascii=False),
                            json.dumps([list(s) for s in record.scores], ensure_ascii=False),
                            record.raw_html,
                            record.crawl_time.timestamp(),
                        ),
                    )
            except sqlite3.Error as e:
                raise PersistenceError(f"failed to save {record.url}: {e}", cause=e) from e

    def _query_top_recent(self, limit: int) -> list[CrawlRecord]:
        with self._lock:
            try:
                rows = self.conn.execute(
                    """SELECT url, keywords, scores, html, crawl_time FROM pages
                       ORDER BY crawl_time DESC, id DESC
                       LIMIT ?""",
                    (limit,),
                ).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"failed to load results: {e}", cause=e) from e

        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row) -> CrawlRecord:
        url, keywords, scores, html, crawl_time = row
        return CrawlRecord(
            url=url,
            keywords=tuple(json.loads(keywords)),
            scores=tuple(Score(keyword, count) for keyword, count in json.loads(scores)),
            raw_html=html,
            crawl_time=datetime.fromtimestamp(crawl_time, tz=timezone.utc),
        )

    async def insert(self, record: CrawlRecord) -> None:
        """
        Store a record in one transaction.

        If the caller is cancelled (for example by a timeout) before the
        worker thread gets the connection, the write is skipped.
        """
        cancelled = threading.Event()
        try:
            await asyncio.to_thread(self._insert, record, cancelled)
        except asyncio.CancelledError:
            cancelled.set()
            logger.warning("Abandoned write of %s", record.url)
            raise
        logger.debug("Stored %s", record.url)

    async def query_top_recent(self, limit: int) -> list[CrawlRecord]:
        """Return up to ``limit`` records, newest crawl first."""
        if limit <= 0:
            return []
        return await asyncio.to_thread(self._query_top_recent, limit)

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return self.conn.execute("SELECT COUNT(*) FROM pages").fetchone()[0]

    def close(self):
        """Close database connection."""
        with self._lock:
            self.conn.close()
