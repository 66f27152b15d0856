# ABOUTME: SQL DDL statements for the shelfcount catalog database.
# ABOUTME: Defines the books table, the append-only checkouts log, and migrations.

SCHEMA_V1 = """
-- One row per catalog record at the tracked location
CREATE TABLE books (
    id            TEXT PRIMARY KEY,
    title         TEXT,
    author        TEXT,
    isbn          TEXT,
    cover         TEXT,
    summary       TEXT,
    enriched      INTEGER NOT NULL DEFAULT 0,
    inventory     INTEGER CHECK (inventory IS NULL OR inventory >= 0),
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_books_isbn ON books(isbn) WHERE isbn IS NOT NULL;
CREATE INDEX idx_books_unenriched ON books(id) WHERE enriched = 0;

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

MIGRATION_V2 = """
-- Inferred checkouts, one row per unit of availability decrease
CREATE TABLE checkouts (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    book_id   TEXT NOT NULL,
    timestamp TEXT NOT NULL
);

CREATE INDEX idx_checkouts_book_id ON checkouts(book_id);

INSERT INTO schema_version (version) VALUES (2);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
]
