# ABOUTME: Read and write operations for the shelfcount catalog database.
# ABOUTME: Book upserts, enrichment updates, inventory snapshots, and checkout appends.

import logging
import sqlite3

from shelfcount.db.mapping import BookRecord, CheckoutTally, row_to_record
from shelfcount.inventory.types import CheckoutEvent, InventoryItem
from shelfcount.sources.types import CatalogBook, EnrichedMetadata

logger = logging.getLogger(__name__)

_NOW = "strftime('%Y-%m-%dT%H:%M:%S', 'now')"


class PersistenceError(Exception):
    """Raised when a batch of inventory writes cannot be committed."""


class FatalStartupError(Exception):
    """Raised when the inventory snapshot cannot be read at the start of a run."""


class BookCatalog:
    """Wraps a sqlite3 connection and provides typed access to books and checkouts."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Catalog records ---

    def upsert_books(self, books: list[CatalogBook]) -> int:
        """Insert new books or refresh title/author/isbn/cover on existing ones.

        Inventory and enrichment state of existing rows is left alone.

        Returns:
            The number of rows written.
        """
        if not books:
            return 0

        self._conn.executemany(
            "INSERT INTO books (id, title, author, isbn, cover) "
            "VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(id) DO UPDATE SET "
            "title = excluded.title, "
            "author = excluded.author, "
            "isbn = excluded.isbn, "
            "cover = excluded.cover, "
            f"date_modified = {_NOW}",
            [(b.id, b.title, b.author, b.isbn, b.cover) for b in books],
        )
        self._conn.commit()
        return len(books)

    def get_by_id(self, book_id: str) -> BookRecord | None:
        """Retrieve a book by its catalog record ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[BookRecord]:
        """Return all books, ordered by title."""
        cursor = self._conn.execute("SELECT * FROM books ORDER BY title")
        return [row_to_record(row) for row in cursor.fetchall()]

    def list_unenriched(self, limit: int | None = None) -> list[BookRecord]:
        """Return books that have not been through metadata enrichment yet."""
        sql = "SELECT * FROM books WHERE enriched = 0 ORDER BY rowid"
        params: tuple[int, ...] = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        cursor = self._conn.execute(sql, params)
        return [row_to_record(row) for row in cursor.fetchall()]

    def apply_enrichment(self, book_id: str, metadata: EnrichedMetadata) -> None:
        """Overwrite fields the metadata feed supplied and mark the book enriched.

        Fields the feed left empty keep their current value.

        Raises:
            ValueError: If the book_id does not exist.
        """
        cursor = self._conn.execute(
            "UPDATE books SET "
            "title = COALESCE(?, title), "
            "author = COALESCE(?, author), "
            "summary = COALESCE(?, summary), "
            "cover = COALESCE(?, cover), "
            "enriched = 1, "
            f"date_modified = {_NOW} "
            "WHERE id = ?",
            (metadata.title, metadata.author, metadata.description, metadata.cover, book_id),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")

    def mark_enriched(self, book_id: str) -> None:
        """Flag a book as enriched without changing any of its fields.

        Raises:
            ValueError: If the book_id does not exist.
        """
        cursor = self._conn.execute(
            f"UPDATE books SET enriched = 1, date_modified = {_NOW} WHERE id = ?",
            (book_id,),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Book with id {book_id} not found")

    # --- Inventory sampling ---

    def load_inventory_snapshot(self) -> list[InventoryItem]:
        """Read every tracked book with its last persisted availability count.

        Raises:
            FatalStartupError: If the books table cannot be read.
        """
        try:
            cursor = self._conn.execute("SELECT id, inventory FROM books ORDER BY rowid")
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            raise FatalStartupError(f"Could not read inventory snapshot: {exc}") from exc

        return [InventoryItem(id=row["id"], previous=row["inventory"]) for row in rows]

    def commit_inventory_batch(
        self,
        counts: list[tuple[str, int]],
        checkouts: list[CheckoutEvent],
    ) -> None:
        """Persist one batch of observed counts and inferred checkouts atomically.

        Counts are upserted (only the inventory column is overwritten);
        checkouts are appended. Either both land or neither does.

        Raises:
            PersistenceError: If the transaction fails. It is rolled back.
        """
        if not counts and not checkouts:
            return

        try:
            with self._conn:
                if counts:
                    self._conn.executemany(
                        "INSERT INTO books (id, inventory) VALUES (?, ?) "
                        "ON CONFLICT(id) DO UPDATE SET inventory = excluded.inventory",
                        counts,
                    )
                if checkouts:
                    self._conn.executemany(
                        "INSERT INTO checkouts (book_id, timestamp) VALUES (?, ?)",
                        [
                            (event.book_id, event.timestamp.isoformat(timespec="seconds"))
                            for event in checkouts
                        ],
                    )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not commit inventory batch: {exc}") from exc

        logger.debug("Committed %d count(s) and %d checkout(s)", len(counts), len(checkouts))

    # --- Checkouts ---

    def count_checkouts(self, book_id: str | None = None) -> int:
        """Count inferred checkouts, for one book or overall."""
        if book_id is None:
            cursor = self._conn.execute("SELECT COUNT(*) FROM checkouts")
        else:
            cursor = self._conn.execute(
                "SELECT COUNT(*) FROM checkouts WHERE book_id = ?", (book_id,)
            )
        return cursor.fetchone()[0]

    def top_checkouts(self, limit: int = 20) -> list[CheckoutTally]:
        """Books with the most inferred checkouts, highest first."""
        cursor = self._conn.execute(
            "SELECT c.book_id, b.title, b.author, COUNT(*) AS total "
            "FROM checkouts c "
            "LEFT JOIN books b ON b.id = c.book_id "
            "GROUP BY c.book_id "
            "ORDER BY total DESC, c.book_id "
            "LIMIT ?",
            (limit,),
        )
        return [
            CheckoutTally(
                book_id=row["book_id"],
                title=row["title"],
                author=row["author"],
                checkouts=row["total"],
            )
            for row in cursor.fetchall()
        ]
