# ABOUTME: Book metadata lookup against the Goodreads search XML feed.
# ABOUTME: Parses the best-book match for an ISBN into EnrichedMetadata.

import logging

from lxml import etree

from shelfcount.settings import Settings
from shelfcount.sources.http import HttpClient
from shelfcount.sources.types import EnrichedMetadata

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search/search"
_BEST_BOOK_XPATH = "/GoodreadsResponse/search/results/work[1]/best_book"


class MetadataParseError(Exception):
    """Raised when the metadata feed returns a document that is not valid XML."""


def _text(element: etree._Element, path: str) -> str | None:
    """Return the stripped text of the first match for path, or None."""
    found = element.find(path)
    if found is None or found.text is None:
        return None
    return found.text.strip() or None


def parse_search_response(xml: str | bytes) -> EnrichedMetadata | None:
    """Extract the best-book match from a search response.

    Returns None when the search produced no results. Bytes are decoded by
    lxml using the document's own encoding declaration; text is assumed to
    be UTF-8.

    Raises:
        MetadataParseError: If the document cannot be parsed.
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")
    try:
        root = etree.fromstring(xml)
    except etree.XMLSyntaxError as exc:
        raise MetadataParseError(f"Malformed metadata response: {exc}") from exc

    matches = root.xpath(_BEST_BOOK_XPATH)
    if not matches:
        return None

    best_book = matches[0]
    return EnrichedMetadata(
        title=_text(best_book, "title"),
        author=_text(best_book, "author/name"),
        description=_text(best_book, "description"),
        cover=_text(best_book, "large_image_url"),
    )


class GoodreadsClient:
    """Looks books up by ISBN in the Goodreads search feed."""

    def __init__(self, http_client: HttpClient, settings: Settings) -> None:
        self._http = http_client
        self._base_url = settings.goodreads_base_url.rstrip("/")
        self._api_key = settings.goodreads_api_key or ""

    def lookup_isbn(self, isbn: str) -> EnrichedMetadata | None:
        """Search for an ISBN and return the best match, or None on no results.

        Raises:
            FetchError: On transport or HTTP errors.
            MetadataParseError: On malformed XML.
        """
        params = {
            "_extras[book_covers_large]": "true",
            "_nc": "true",
            "auto_search": "1",
            "format": "xml",
            "include_book_description": "true",
            "include_social_shelving_info": "true",
            "key": self._api_key,
            "page": "1",
            "per_page": "5",
            "q": isbn,
            "search[field]": "all",
        }
        body = self._http.get_bytes(f"{self._base_url}{SEARCH_PATH}", params=params)
        logger.debug("Metadata search for %s returned %d bytes", isbn, len(body))
        return parse_search_response(body)
