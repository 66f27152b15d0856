# ABOUTME: Public API for the shelfcount catalog database layer.
# ABOUTME: Exports connection management, catalog operations, and record types.

from shelfcount.db.catalog import BookCatalog, FatalStartupError, PersistenceError
from shelfcount.db.connection import open_catalog, open_store
from shelfcount.db.mapping import BookRecord, CheckoutTally

__all__ = [
    "BookCatalog",
    "BookRecord",
    "CheckoutTally",
    "FatalStartupError",
    "PersistenceError",
    "open_catalog",
    "open_store",
]
