# ABOUTME: Metadata enrichment job: fills title, author, summary, and cover from the metadata feed.
# ABOUTME: Each unenriched book is looked up by ISBN once and flagged so it is not retried.

import logging
from dataclasses import dataclass, field

from shelfcount.db.catalog import BookCatalog
from shelfcount.sources.goodreads import GoodreadsClient, MetadataParseError
from shelfcount.sources.http import FetchError

logger = logging.getLogger(__name__)


@dataclass
class EnrichResult:
    """Summary of an enrichment run."""

    updated: int = 0
    not_found: int = 0
    errors: int = 0
    error_details: list[tuple[str, str]] = field(default_factory=list)


def enrich_books(
    metadata: GoodreadsClient,
    catalog: BookCatalog,
    *,
    limit: int | None = None,
) -> EnrichResult:
    """Look up every unenriched book and store what the feed knows about it.

    Books the feed has no match for, and books without an ISBN, are flagged
    as enriched so later runs skip them. Lookup failures are logged and the
    book stays unenriched for the next run.

    Args:
        metadata: Client for the metadata feed.
        catalog: The catalog to read from and update.
        limit: Optional cap on how many books to process.
    """
    result = EnrichResult()

    for book in catalog.list_unenriched(limit=limit):
        if not book.isbn:
            catalog.mark_enriched(book.id)
            result.not_found += 1
            continue

        try:
            found = metadata.lookup_isbn(book.isbn)
        except (FetchError, MetadataParseError) as exc:
            logger.error("Error processing ISBN %s: %s", book.isbn, exc)
            result.errors += 1
            result.error_details.append((book.isbn, str(exc)))
            continue

        if found is None:
            catalog.mark_enriched(book.id)
            result.not_found += 1
            logger.info("No metadata found for ISBN: %s", book.isbn)
            continue

        catalog.apply_enrichment(book.id, found)
        result.updated += 1
        logger.info("Updated book: %s", book.isbn)

    return result
