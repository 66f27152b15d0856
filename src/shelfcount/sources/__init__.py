# ABOUTME: Remote data sources: the catalog search service and the book metadata feed.
# ABOUTME: Exports the HTTP client, source clients, and their result types.

from shelfcount.sources.goodreads import GoodreadsClient, MetadataParseError
from shelfcount.sources.http import FetchError, HttpClient, ShelfcountHttpClient
from shelfcount.sources.types import CatalogBook, EnrichedMetadata
from shelfcount.sources.vega import VegaCatalog

__all__ = [
    "CatalogBook",
    "EnrichedMetadata",
    "FetchError",
    "GoodreadsClient",
    "HttpClient",
    "MetadataParseError",
    "ShelfcountHttpClient",
    "VegaCatalog",
]
