# ABOUTME: Data structures returned by the remote catalog and metadata sources.
# ABOUTME: CatalogBook feeds the harvester; EnrichedMetadata feeds the enricher.

from dataclasses import dataclass


@dataclass
class CatalogBook:
    """A book record from the catalog search service, already cleaned for storage."""

    id: str
    title: str
    author: str | None
    isbn: str
    cover: str


@dataclass
class EnrichedMetadata:
    """Best-match book fields from the metadata feed.

    Any field the feed leaves out is None; storing the metadata keeps the
    book's current value for that field.
    """

    title: str | None = None
    author: str | None = None
    description: str | None = None
    cover: str | None = None
