# ABOUTME: Client for the library catalog search service (Vega discovery API).
# ABOUTME: Pages format-group search results and reads per-record availability drawers.

from typing import Any
from urllib.parse import quote

from shelfcount.settings import Settings
from shelfcount.sources.http import HttpClient

SEARCH_PATH = "/api/search-result/search/format-groups"
DRAWER_PATH = "/api/search-result/drawer/{record_id}"
DEFAULT_PAGE_SIZE = 100


class VegaCatalog:
    """Thin wrapper over the catalog endpoints.

    Every request carries the anonymous-user and domain headers the service
    requires. Errors surface as FetchError from the HttpClient.
    """

    def __init__(self, http_client: HttpClient, settings: Settings) -> None:
        self._http = http_client
        self._base_url = settings.vega_base_url.rstrip("/")
        self._location = settings.vega_location_code
        self._headers = {
            "accept": "application/json",
            "anonymous-user-id": settings.vega_anonymous_user_id,
            "iii-customer-domain": settings.vega_customer_domain,
            "iii-host-domain": settings.vega_host_domain,
        }

    @property
    def location(self) -> str:
        return self._location

    def search_page(
        self,
        from_year: int,
        to_year: int,
        page_num: int,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Fetch one page of books at this location published in [from_year, to_year]."""
        body = {
            "searchText": "*",
            "sorting": "publicationDate",
            "sortOrder": "desc",
            "searchType": "everything",
            "universalLimiterIds": ["at_library"],
            "materialTypeIds": ["a"],
            "locationIds": [self._location],
            "pageNum": page_num,
            "pageSize": page_size,
            "dateFrom": str(from_year),
            "dateTo": str(to_year),
        }
        headers = {**self._headers, "api-version": "2", "content-type": "application/json"}
        return self._http.post(f"{self._base_url}{SEARCH_PATH}", body, headers=headers)

    def drawer(self, record_id: str) -> Any:
        """Fetch the copy-level drawer for a record, limited to this location."""
        params = {"tab": "Book", "locationCodes": self._location}
        headers = {**self._headers, "api-version": "1"}
        path = DRAWER_PATH.format(record_id=quote(record_id, safe=""))
        url = f"{self._base_url}{path}"
        return self._http.get(url, params=params, headers=headers)
