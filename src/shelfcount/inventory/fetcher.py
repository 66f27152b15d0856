# ABOUTME: Reads a record's current available-copy count from the catalog service.
# ABOUTME: Never raises: every failure comes back as a failed FetchResult.

import logging

from shelfcount.inventory.types import FetchResult, TransientFetchError
from shelfcount.sources.http import FetchError
from shelfcount.sources.vega import VegaCatalog
from shelfcount.sources.vega_parser import MalformedResponseError, count_available

logger = logging.getLogger(__name__)


class InventoryFetcher:
    """One drawer request per call, no retry."""

    def __init__(self, catalog: VegaCatalog) -> None:
        self._catalog = catalog

    def fetch(self, book_id: str) -> FetchResult:
        try:
            data = self._catalog.drawer(book_id)
            count = count_available(data)
        except (FetchError, MalformedResponseError) as exc:
            logger.debug("Availability fetch failed for %s: %s", book_id, exc)
            return FetchResult.failure(book_id, TransientFetchError(str(exc)))
        return FetchResult.success(book_id, count)
