"""CLI interface using typer."""

import asyncio
import json
import logging

import typer

from .config import settings
from .errors import CrawlError
from .models import CrawlRecord
from .store import SQLiteResultStore

app = typer.Typer(
    name="keyword-crawler",
    help="Fetch a page and score it against keywords",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Show debug logging"),
):
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _open_store(db: str | None) -> SQLiteResultStore:
    try:
        return SQLiteResultStore(db or settings.db_path)
    except CrawlError as e:
        typer.echo(f"Cannot open results database {e}", err=True)
        raise typer.Exit(code=1)


def _echo_record(record: CrawlRecord):
    typer.echo(f"URL: {record.url}")
    typer.echo(f"Crawled: {record.crawl_time:%Y-%m-%d %H:%M:%S %Z}")
    for s in sorted(record.scores, key=lambda s: s.count, reverse=True):
        typer.echo(f"  {s.keyword}: {s.count}")


@app.command()
def crawl(
    url: str = typer.Argument(..., help="URL to crawl"),
    keywords: str = typer.Option(..., "-k", "--keywords", help="Comma-separated keywords"),
    db: str = typer.Option(None, "--db", help="SQLite database path"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSON)"),
):
    """Crawl a single URL and store its keyword scores."""
    from .pipeline import run_crawl

    store = _open_store(db)
    try:
        record = asyncio.run(run_crawl(
            url,
            keywords,
            store,
            timeout=settings.timeout,
            store_timeout=settings.store_timeout,
            user_agent=settings.user_agent,
            accept=settings.accept,
            accept_language=settings.accept_language,
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
        ))
    except CrawlError as e:
        typer.echo(f"Crawl failed {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        store.close()

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)
        typer.echo(f"Saved to {output}")
    else:
        _echo_record(record)


@app.command()
def results(
    limit: int = typer.Option(None, "--limit", "-n", help="Number of records to show"),
    db: str = typer.Option(None, "--db", help="SQLite database path"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSONL)"),
    html: bool = typer.Option(True, "--html/--no-html", help="Include page HTML in output file"),
):
    """Show the most recent crawl results."""
    from .output import export_records

    if limit is None:
        limit = settings.results_limit

    store = _open_store(db)
    try:
        records = asyncio.run(store.query_top_recent(limit))
    except CrawlError as e:
        typer.echo(f"Failed to fetch results {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        store.close()

    if output:
        count = export_records(records, output, include_html=html)
        typer.echo(f"Saved {count} records to {output}")
        return

    if not records:
        typer.echo("No results yet")
        return

    for i, record in enumerate(records, 1):
        typer.echo(f"{i}. ", nl=False)
        _echo_record(record)


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"keyword-crawler {__version__}")


if __name__ == "__main__":
    app()
