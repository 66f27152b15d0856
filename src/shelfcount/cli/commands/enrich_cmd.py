# ABOUTME: The `shelfcount enrich` command for filling book details from the metadata feed.
# ABOUTME: Looks up each unenriched book by ISBN and stores title, author, summary, and cover.

from pathlib import Path

import click
from rich.console import Console

from shelfcount.cli.options import db_option
from shelfcount.core.enricher import enrich_books
from shelfcount.db.catalog import BookCatalog
from shelfcount.db.connection import open_store
from shelfcount.settings import Settings
from shelfcount.sources.goodreads import GoodreadsClient
from shelfcount.sources.http import ShelfcountHttpClient

console = Console()


@click.command("enrich")
@db_option
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Process at most this many books.",
)
@click.pass_obj
def enrich(settings: Settings, db_path: Path | None, limit: int | None) -> None:
    """Enrich unprocessed books with metadata looked up by ISBN."""
    if not settings.goodreads_api_key:
        raise click.ClickException("GOODREADS_API_KEY is not set.")

    client = ShelfcountHttpClient(min_request_interval=settings.request_interval)
    with open_store(db_path or settings.db_path) as conn, client:
        result = enrich_books(GoodreadsClient(client, settings), BookCatalog(conn), limit=limit)

    parts = [f"[green]{result.updated} updated[/green]"]
    if result.not_found:
        parts.append(f"[yellow]{result.not_found} without a match[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")
    console.print(", ".join(parts))

    if result.error_details:
        console.print("\n[yellow]Will retry on the next run:[/yellow]")
        for isbn, msg in result.error_details:
            console.print(f"  [dim]{isbn}:[/dim] {msg}")
