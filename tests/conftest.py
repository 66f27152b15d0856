# ABOUTME: Shared pytest fixtures for shelfcount tests.
# ABOUTME: Provides test settings and a catalog backed by a temporary SQLite database.

from collections.abc import Iterator
from pathlib import Path

import pytest

from shelfcount.db.catalog import BookCatalog
from shelfcount.db.connection import open_catalog
from shelfcount.settings import Settings
from shelfcount.sources.types import CatalogBook


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary database, with no request spacing."""
    return Settings(
        db_path=tmp_path / "catalog.db",
        vega_base_url="https://vega.example.org",
        goodreads_base_url="https://goodreads.example.org",
        goodreads_api_key="test-key",
        request_interval=0.0,
    )


@pytest.fixture
def catalog(settings: Settings) -> Iterator[BookCatalog]:
    """Provide a BookCatalog backed by a temporary database."""
    conn = open_catalog(settings.db_path)
    yield BookCatalog(conn)
    conn.close()


@pytest.fixture
def sample_books() -> list[CatalogBook]:
    """Three cleaned catalog records."""
    return [
        CatalogBook(
            id="fg-1001",
            title="The Name Of The Rose",
            author="Umberto Eco",
            isbn="9780156001311",
            cover="https://covers.example.org/rose-m.jpg",
        ),
        CatalogBook(
            id="fg-1002",
            title="Dune",
            author="Frank Herbert",
            isbn="9780441013593",
            cover="https://covers.example.org/dune-m.jpg",
        ),
        CatalogBook(
            id="fg-1003",
            title="Beloved",
            author="Toni Morrison",
            isbn="9781400033416",
            cover="https://covers.example.org/beloved-m.jpg",
        ),
    ]


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the CLI at a temporary database and fake service hosts.

    Returns the database path the CLI will use.
    """
    db_path = tmp_path / "cli.db"
    monkeypatch.chdir(tmp_path)
    env = {
        "SHELFCOUNT_DB": str(db_path),
        "VEGA_BASE_URL": "https://vega.example.org",
        "GOODREADS_BASE_URL": "https://goodreads.example.org",
        "GOODREADS_API_KEY": "test-key",
        "REQUEST_INTERVAL": "0",
        "LOG_LEVEL": "WARNING",
        "INVENTORY_CONCURRENCY": "2",
        "INVENTORY_BATCH_SIZE": "2",
    }
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return db_path
