# ABOUTME: The `shelfcount harvest` command for pulling catalog records into the database.
# ABOUTME: Pages catalog search results year by year and upserts cleaned book records.

from datetime import date
from pathlib import Path

import click
from rich.console import Console

from shelfcount.cli.options import db_option
from shelfcount.core.harvester import DEFAULT_START_YEAR, harvest_catalog, year_ranges
from shelfcount.db.catalog import BookCatalog
from shelfcount.db.connection import open_store
from shelfcount.settings import Settings
from shelfcount.sources.http import ShelfcountHttpClient
from shelfcount.sources.vega import DEFAULT_PAGE_SIZE, VegaCatalog

console = Console()


@click.command("harvest")
@db_option
@click.option(
    "--from-year",
    type=int,
    default=DEFAULT_START_YEAR,
    show_default=True,
    help="First publication year to harvest.",
)
@click.option(
    "--to-year",
    type=int,
    default=None,
    help="Stop before this publication year (default: the current year).",
)
@click.option(
    "--page-size",
    type=click.IntRange(1, 100),
    default=DEFAULT_PAGE_SIZE,
    show_default=True,
    help="Records requested per search page.",
)
@click.pass_obj
def harvest(
    settings: Settings,
    db_path: Path | None,
    from_year: int,
    to_year: int | None,
    page_size: int,
) -> None:
    """Harvest catalog records at the configured location into the database."""
    end_year = to_year if to_year is not None else date.today().year
    ranges = year_ranges(from_year, end_year)
    if not ranges:
        console.print(f"[yellow]No years to harvest between {from_year} and {end_year}.[/yellow]")
        return

    client = ShelfcountHttpClient(min_request_interval=settings.request_interval)
    with open_store(db_path or settings.db_path) as conn, client:
        source = VegaCatalog(client, settings)
        result = harvest_catalog(source, BookCatalog(conn), ranges, page_size=page_size)

    console.print(
        f"[green]{result.books} book(s)[/green] stored from "
        f"{result.pages} page(s) across {len(ranges)} year range(s)"
    )
    if result.failed_ranges:
        console.print(f"\n[yellow]{len(result.failed_ranges)} year range(s) failed:[/yellow]")
        for from_y, to_y, msg in result.failed_ranges:
            console.print(f"  [dim]{from_y}-{to_y}:[/dim] {msg}")
