# ABOUTME: HTTP client abstraction for catalog and metadata API calls.
# ABOUTME: Provides request spacing, shared headers, and injectable transport for testing.

import logging
import threading
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when an HTTP request to a remote service fails."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the HTTP operations the jobs need."""

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...

    def post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any: ...

    def get_bytes(self, url: str, params: dict[str, str] | None = None) -> bytes: ...


class ShelfcountHttpClient:
    """HTTP client used by every job.

    Wraps httpx.Client with a minimum interval between requests. There is no
    retry: a failed request raises FetchError and the caller decides whether
    to log and move on. Safe to share across worker threads.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": "shelfcount/0.1.0"},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._last_request_time: float = 0.0
        self._lock = threading.Lock()

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a GET request and return the decoded JSON body.

        Raises:
            FetchError: On transport errors, non-2xx status, or invalid JSON.
        """
        response = self._send("GET", url, params=params, headers=headers)
        return self._decode_json(response)

    def post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a JSON POST request and return the decoded JSON body.

        Raises:
            FetchError: On transport errors, non-2xx status, or invalid JSON.
        """
        response = self._send("POST", url, json=body, headers=headers)
        return self._decode_json(response)

    def get_bytes(self, url: str, params: dict[str, str] | None = None) -> bytes:
        """Send a GET request and return the undecoded response body.

        Documents that declare their own encoding, such as XML, should be
        parsed from these bytes rather than from a decoded string.
        """
        return self._send("GET", url, params=params).content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ShelfcountHttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self._rate_limit()
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise FetchError(f"Request failed: {url}: {exc}") from exc

        if not response.is_success:
            raise FetchError(f"HTTP {response.status_code} from {url}")

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from {response.url}: {exc}") from exc

    def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval and self._last_request_time > 0:
                time.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()
