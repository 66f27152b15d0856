# ABOUTME: Converts SQLite rows from the books table into typed records.
# ABOUTME: Keeps a NULL inventory as None so "never sampled" stays distinct from zero.

from dataclasses import dataclass
from typing import Any


@dataclass
class BookRecord:
    """A cataloged book row."""

    id: str
    title: str | None
    author: str | None
    isbn: str | None
    cover: str | None
    summary: str | None
    enriched: bool
    inventory: int | None
    date_added: str
    date_modified: str


@dataclass
class CheckoutTally:
    """Inferred checkout total for one book, used by reports."""

    book_id: str
    title: str | None
    author: str | None
    checkouts: int


def row_to_record(row: Any) -> BookRecord:
    """Convert a full books row (dict-like) to a BookRecord."""
    return BookRecord(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        isbn=row["isbn"],
        cover=row["cover"],
        summary=row["summary"],
        enriched=bool(row["enriched"]),
        inventory=row["inventory"],
        date_added=row["date_added"],
        date_modified=row["date_modified"],
    )
