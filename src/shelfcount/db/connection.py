# ABOUTME: SQLite database connection management for the shelfcount catalog.
# ABOUTME: Opens or creates the database, applies schema, and scopes a connection to a run.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from shelfcount.db.schema import MIGRATIONS, SCHEMA_V1
from shelfcount.settings import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)


def _catalog_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied catalog schema version, or 0 for a blank file."""
    has_versions = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if has_versions is None:
        return 0
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0


def _upgrade_catalog(conn: sqlite3.Connection) -> list[int]:
    """Bring the books table and checkouts log up to the latest schema.

    A blank file gets the books table first; the checkouts log and anything
    later come from MIGRATIONS.

    Returns:
        The versions applied by this call, oldest first.
    """
    applied: list[int] = []
    current = _catalog_version(conn)
    if current == 0:
        conn.executescript(SCHEMA_V1)
        applied.append(1)
        current = 1

    for version, sql in MIGRATIONS:
        if version <= current:
            continue
        logger.debug("Upgrading catalog schema to v%d", version)
        conn.executescript(sql)
        applied.append(version)
    return applied


def open_catalog(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the shelfcount catalog database.

    Creates the database file and parent directories if they don't exist.
    A blank file gets the full schema; an older catalog gains the checkouts
    log. Rows come back as sqlite3.Row and the journal runs in WAL mode.

    Args:
        path: Path to the database file. Defaults to ~/.shelfcount/catalog.db.

    Returns:
        A configured sqlite3.Connection.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")

    applied = _upgrade_catalog(conn)
    if applied:
        logger.info("Catalog schema at %s is now v%d", db_path, applied[-1])

    return conn


@contextmanager
def open_store(path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open the catalog for the duration of one job run.

    The connection is closed on every exit path, including errors raised
    by the job body.
    """
    conn = open_catalog(path)
    try:
        yield conn
    finally:
        conn.close()
