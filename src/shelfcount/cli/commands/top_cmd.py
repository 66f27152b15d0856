# ABOUTME: The `shelfcount top` command for listing the most checked-out books.
# ABOUTME: Displays a Rich table of inferred checkout totals per book.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfcount.cli.options import db_option
from shelfcount.db.catalog import BookCatalog
from shelfcount.db.connection import open_store
from shelfcount.settings import Settings

console = Console()


@click.command("top")
@db_option
@click.option(
    "-n", "--limit",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Number of books to show.",
)
@click.pass_obj
def top(settings: Settings, db_path: Path | None, limit: int) -> None:
    """List books with the most inferred checkouts."""
    with open_store(db_path or settings.db_path) as conn:
        catalog = BookCatalog(conn)
        tallies = catalog.top_checkouts(limit)
        total = catalog.count_checkouts()

    if not tallies:
        console.print("[yellow]No checkouts recorded yet.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Checkouts", justify="right")

    for tally in tallies:
        table.add_row(
            tally.book_id,
            tally.title or "[dim]unknown[/dim]",
            tally.author or "[dim]unknown[/dim]",
            str(tally.checkouts),
        )

    console.print(table)
    console.print(f"\n[dim]{total} checkout(s) recorded in total[/dim]")
