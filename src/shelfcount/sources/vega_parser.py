# ABOUTME: Parsing functions for catalog search service JSON responses.
# ABOUTME: Converts search pages into CatalogBooks and drawer payloads into available counts.

from typing import Any

from shelfcount.sources.cleaning import clean_author, clean_title
from shelfcount.sources.types import CatalogBook

AVAILABLE_STATUS = "Available"


class MalformedResponseError(ValueError):
    """Raised when a response is missing the fields the parser relies on."""


def _nested(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None at the first missing key."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def search_records(data: Any) -> list[Any]:
    """Return the records on a search page; an empty list means no more pages.

    Raises:
        MalformedResponseError: If the page is not an object, or its "data"
            field is present but not a list.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("search page is not a JSON object")
    records = data.get("data")
    if records is None:
        return []
    if not isinstance(records, list):
        raise MalformedResponseError("search page 'data' is not a list")
    return records


def parse_search_results(data: Any) -> list[CatalogBook]:
    """Parse one page of format-group search results.

    Records missing an id, title, primary agent label, ISBN, or medium cover
    URL are dropped. Title and author are cleaned for display.

    Raises:
        MalformedResponseError: If the page itself has the wrong shape.
    """
    books: list[CatalogBook] = []
    for record in search_records(data):
        if not isinstance(record, dict):
            continue
        record_id = record.get("id")
        title = record.get("title")
        author = _nested(record, "primaryAgent", "label")
        isbn = _nested(record, "identifiers", "isbn")
        cover = _nested(record, "coverUrl", "medium")
        if record_id in (None, "") or not (title and author and isbn and cover):
            continue
        if not (isinstance(title, str) and isinstance(author, str)):
            continue

        books.append(
            CatalogBook(
                id=str(record_id),
                title=clean_title(title),
                author=clean_author(author),
                isbn=str(isbn),
                cover=cover,
            )
        )
    return books


def count_available(data: Any) -> int:
    """Count the copies in a drawer response whose status is "Available".

    Raises:
        MalformedResponseError: If the payload has no items list, or an item
            has no status object.
    """
    items = _nested(data, "items")
    if not isinstance(items, list):
        raise MalformedResponseError("response has no 'items' list")

    available = 0
    for item in items:
        status = _nested(item, "status")
        if not isinstance(status, dict):
            raise MalformedResponseError("item is missing its 'status' object")
        if status.get("availabilityStatus") == AVAILABLE_STATUS:
            available += 1
    return available
