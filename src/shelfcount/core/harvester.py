# ABOUTME: Catalog harvest job: pages catalog search results into the books table.
# ABOUTME: Walks publication years one range at a time and upserts cleaned records.

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from shelfcount.db.catalog import BookCatalog
from shelfcount.sources.http import FetchError
from shelfcount.sources.vega import DEFAULT_PAGE_SIZE, VegaCatalog
from shelfcount.sources.vega_parser import (
    MalformedResponseError,
    parse_search_results,
    search_records,
)

logger = logging.getLogger(__name__)

DEFAULT_START_YEAR = 1989


@dataclass
class HarvestResult:
    """Summary of a harvest run."""

    pages: int = 0
    books: int = 0
    failed_ranges: list[tuple[int, int, str]] = field(default_factory=list)


def year_ranges(start_year: int, end_year: int) -> list[tuple[int, int]]:
    """One (year, year + 1) range for every year in [start_year, end_year)."""
    return [(year, year + 1) for year in range(start_year, end_year)]


def harvest_range(
    source: VegaCatalog,
    catalog: BookCatalog,
    from_year: int,
    to_year: int,
    result: HarvestResult,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> None:
    """Page through one publication-year range until the service runs dry.

    Pages with no complete records are skipped; paging stops at the first
    empty page. Pages already stored stay stored if a later page fails.

    Raises:
        FetchError: If a page request fails.
        MalformedResponseError: If a page has the wrong shape.
    """
    page_num = 1
    harvested = 0
    logger.info("Starting fetch for years %d-%d", from_year, to_year)

    while True:
        data = source.search_page(from_year, to_year, page_num, page_size)
        if not search_records(data):
            break

        result.pages += 1
        books = parse_search_results(data)
        if not books:
            logger.info("Page %d had no valid books, continuing...", page_num)
            page_num += 1
            continue

        harvested += catalog.upsert_books(books)
        result.books += len(books)
        logger.info("Page %d processed. Total books so far: %d", page_num, harvested)
        page_num += 1

    logger.info(
        "Finished processing years %d-%d. Total processed: %d", from_year, to_year, harvested
    )


def harvest_catalog(
    source: VegaCatalog,
    catalog: BookCatalog,
    ranges: Iterable[tuple[int, int]],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> HarvestResult:
    """Harvest every year range, moving on when one fails.

    Returns:
        HarvestResult with page and book totals plus any failed ranges.
    """
    result = HarvestResult()

    for from_year, to_year in ranges:
        try:
            harvest_range(source, catalog, from_year, to_year, result, page_size=page_size)
        except (FetchError, MalformedResponseError) as exc:
            logger.error("Error fetching books for years %d-%d: %s", from_year, to_year, exc)
            result.failed_ranges.append((from_year, to_year, str(exc)))

    return result
