# ABOUTME: The `shelfcount inventory` command for sampling availability and inferring checkouts.
# ABOUTME: Runs the batched inventory job against the catalog and reports what was recorded.

import json as json_lib
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from shelfcount.cli.options import db_option
from shelfcount.db.catalog import BookCatalog, FatalStartupError, PersistenceError
from shelfcount.db.connection import open_store
from shelfcount.inventory.fetcher import InventoryFetcher
from shelfcount.inventory.runner import InventoryRunner
from shelfcount.inventory.types import BatchReport, InventoryRunResult
from shelfcount.settings import Settings
from shelfcount.sources.http import ShelfcountHttpClient
from shelfcount.sources.vega import VegaCatalog

console = Console()


@click.command("inventory")
@db_option
@click.option(
    "-c", "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum availability requests in flight (default: $INVENTORY_CONCURRENCY or 5).",
)
@click.option(
    "-b", "--batch-size",
    type=click.IntRange(min=1),
    default=None,
    help="Books committed per batch (default: $INVENTORY_BATCH_SIZE or 50).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output the run summary as JSON.",
)
@click.pass_obj
def inventory(
    settings: Settings,
    db_path: Path | None,
    concurrency: int | None,
    batch_size: int | None,
    json_output: bool,
) -> None:
    """Sample availability for every book and record inferred checkouts."""
    committed: list[BatchReport] = []

    def on_batch(report: BatchReport, total: int) -> None:
        committed.append(report)

    with open_store(db_path or settings.db_path) as conn, ShelfcountHttpClient() as http_client:
        runner = InventoryRunner(
            InventoryFetcher(VegaCatalog(http_client, settings)),
            BookCatalog(conn),
            concurrency_limit=concurrency or settings.concurrency_limit,
            batch_size=batch_size or settings.batch_size,
            on_batch=on_batch,
        )
        try:
            result = runner.run()
        except FatalStartupError as exc:
            console.print(f"[red]Could not read the inventory snapshot:[/red] {exc}")
            raise SystemExit(1) from exc
        except PersistenceError as exc:
            console.print(f"[red]Inventory run stopped:[/red] {exc}")
            console.print(
                f"[yellow]{len(committed)} batch(es) were committed before the failure. "
                "Re-run to pick up the rest.[/yellow]"
            )
            raise SystemExit(1) from exc

    if json_output:
        _print_json(result)
        return

    _print_rich(result)


def _print_json(result: InventoryRunResult) -> None:
    """Print the run summary as JSON."""
    data = {
        "total_books": result.total_items,
        "batches": len(result.batches),
        "updated": result.succeeded,
        "failed": result.failed,
        "checkouts": result.checkouts,
        "failed_ids": result.failed_ids,
    }
    click.echo(json_lib.dumps(data, indent=2))


def _print_rich(result: InventoryRunResult) -> None:
    """Print the run summary with Rich formatting."""
    if result.total_items == 0:
        console.print("[yellow]No books in the catalog. Run `shelfcount harvest` first.[/yellow]")
        return

    table = Table(title="Inventory Run")
    table.add_column("Batch", justify="right", style="dim")
    table.add_column("Books", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Checkouts", justify="right")

    for batch in result.batches:
        table.add_row(
            str(batch.index + 1),
            str(batch.size),
            str(batch.succeeded),
            f"[red]{batch.failed}[/red]" if batch.failed else "0",
            str(batch.checkouts),
        )

    console.print(table)
    console.print(
        f"\n[bold]{result.total_items} book(s) sampled:[/bold] "
        f"[green]{result.succeeded} updated[/green], "
        f"{result.checkouts} checkout(s) recorded"
    )
    if result.failed:
        console.print(f"[yellow]{result.failed} book(s) could not be read this run.[/yellow]")
