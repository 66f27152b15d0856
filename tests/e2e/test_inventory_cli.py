# ABOUTME: End-to-end tests for the `shelfcount inventory` CLI command.
# ABOUTME: Runs the command against a temporary catalog with the HTTP transport faked out.

import json
from functools import partial
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from shelfcount.cli import cli
from shelfcount.cli.commands import inventory_cmd
from shelfcount.db.catalog import BookCatalog
from shelfcount.db.connection import open_store
from shelfcount.sources.http import ShelfcountHttpClient
from shelfcount.sources.types import CatalogBook
from shelfcount.sources.vega import DRAWER_PATH
from tests.fixtures.transport import FakeTransport
from tests.fixtures.vega_responses import drawer


def _drawer(book_id: str, *statuses: str) -> tuple[str, httpx.Response]:
    return DRAWER_PATH.format(record_id=book_id), httpx.Response(200, json=drawer(*statuses))


@pytest.fixture
def fake_transport(monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    """Route the command's HTTP client through a FakeTransport."""
    transport = FakeTransport(
        dict(
            [
                _drawer("fg-1001", "Checked Out"),
                _drawer("fg-1002", "Available", "Available"),
                _drawer("fg-1003", "Available"),
            ]
        )
    )
    monkeypatch.setattr(
        inventory_cmd, "ShelfcountHttpClient", partial(ShelfcountHttpClient, transport=transport)
    )
    return transport


@pytest.fixture
def stocked_db(cli_env: Path, sample_books: list[CatalogBook]) -> Path:
    """Catalog where every book had one copy available at the last sample."""
    with open_store(cli_env) as conn:
        catalog = BookCatalog(conn)
        catalog.upsert_books(sample_books)
        catalog.commit_inventory_batch([(book.id, 1) for book in sample_books], [])
    return cli_env


class TestInventoryCliRichOutput:
    """E2E tests for inventory command Rich (default) output."""

    def test_empty_catalog(self, cli_env: Path, fake_transport: FakeTransport) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inventory"])
        assert result.exit_code == 0
        assert "No books in the catalog" in result.output
        assert fake_transport.call_count == 0

    def test_summary(self, stocked_db: Path, fake_transport: FakeTransport) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inventory"])
        assert result.exit_code == 0
        assert "Inventory Run" in result.output
        assert "3 book(s) sampled" in result.output
        assert "1 checkout(s) recorded" in result.output
        assert fake_transport.call_count == 3

    def test_failed_books_are_reported(
        self, stocked_db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        broken = FakeTransport(dict([_drawer("fg-1001", "Checked Out")]))
        monkeypatch.setattr(
            inventory_cmd, "ShelfcountHttpClient", partial(ShelfcountHttpClient, transport=broken)
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["inventory"])
        assert result.exit_code == 0
        assert "2 book(s) could not be read this run." in result.output


class TestInventoryCliJsonOutput:
    """E2E tests for inventory command --json output."""

    def test_json_summary(self, stocked_db: Path, fake_transport: FakeTransport) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inventory", "--json", "--batch-size", "1"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {
            "total_books": 3,
            "batches": 3,
            "updated": 3,
            "failed": 0,
            "checkouts": 1,
            "failed_ids": [],
        }

    def test_counts_are_stored(self, stocked_db: Path, fake_transport: FakeTransport) -> None:
        runner = CliRunner()
        runner.invoke(cli, ["inventory", "--json"])

        with open_store(stocked_db) as conn:
            catalog = BookCatalog(conn)
            inventory = {r.id: r.inventory for r in catalog.list_all()}
            assert catalog.count_checkouts("fg-1001") == 1

        assert inventory == {"fg-1001": 0, "fg-1002": 2, "fg-1003": 1}

    def test_concurrency_option_validated(self, cli_env: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inventory", "--concurrency", "0"])
        assert result.exit_code == 2


class TestInventoryCliFailures:
    """E2E tests for fatal inventory errors."""

    def test_unreadable_snapshot_exits_1(
        self, stocked_db: Path, fake_transport: FakeTransport
    ) -> None:
        with open_store(stocked_db) as conn:
            conn.execute("DROP TABLE books")
            conn.commit()

        runner = CliRunner()
        result = runner.invoke(cli, ["inventory"])

        assert result.exit_code == 1
        assert "Could not read the inventory snapshot" in result.output
        assert fake_transport.call_count == 0

    def test_commit_failure_exits_1_and_keeps_earlier_batches(
        self, stocked_db: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Only the last book loses a copy, so only the last batch writes a checkout.
        transport = FakeTransport(
            dict(
                [
                    _drawer("fg-1001", "Available"),
                    _drawer("fg-1002", "Available", "Available"),
                    _drawer("fg-1003", "Checked Out"),
                ]
            )
        )
        monkeypatch.setattr(
            inventory_cmd, "ShelfcountHttpClient", partial(ShelfcountHttpClient, transport=transport)
        )
        with open_store(stocked_db) as conn:
            conn.execute("DROP TABLE checkouts")
            conn.commit()

        runner = CliRunner()
        result = runner.invoke(cli, ["inventory", "--batch-size", "1"])

        assert result.exit_code == 1
        assert "Inventory run stopped" in result.output
        assert "2 batch(es) were committed" in result.output
        with open_store(stocked_db) as conn:
            inventory = {r.id: r.inventory for r in BookCatalog(conn).list_all()}
        assert inventory == {"fg-1001": 1, "fg-1002": 2, "fg-1003": 1}
