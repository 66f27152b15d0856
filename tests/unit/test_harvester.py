# ABOUTME: Unit tests for the catalog harvest job.
# ABOUTME: Validates year ranges, paging termination, invalid pages, and per-range failures.

import logging

import httpx
import pytest

from shelfcount.core.harvester import HarvestResult, harvest_catalog, harvest_range, year_ranges
from shelfcount.db.catalog import BookCatalog
from shelfcount.settings import Settings
from shelfcount.sources.http import FetchError, ShelfcountHttpClient
from shelfcount.sources.vega import SEARCH_PATH, VegaCatalog
from tests.fixtures.transport import FakeTransport
from tests.fixtures.vega_responses import (
    SEARCH_PAGE,
    SEARCH_PAGE_ALL_INVALID,
    SEARCH_PAGE_EMPTY,
    SEARCH_PAGE_RECORD_WITHOUT_ID,
)


def _ok(payload: object) -> httpx.Response:
    return httpx.Response(200, json=payload)


def _source(settings: Settings, transport: FakeTransport) -> VegaCatalog:
    return VegaCatalog(ShelfcountHttpClient(transport=transport), settings)


class TestYearRanges:
    """Tests for year_ranges."""

    def test_one_range_per_year(self) -> None:
        assert year_ranges(1989, 1992) == [(1989, 1990), (1990, 1991), (1991, 1992)]

    def test_empty_when_start_not_before_end(self) -> None:
        assert year_ranges(2000, 2000) == []


class TestHarvestRange:
    """Tests for harvest_range."""

    def test_pages_until_empty(self, settings: Settings, catalog: BookCatalog) -> None:
        transport = FakeTransport(
            {SEARCH_PATH: [_ok(SEARCH_PAGE), _ok(SEARCH_PAGE_EMPTY)]}
        )
        result = HarvestResult()

        harvest_range(_source(settings, transport), catalog, 1999, 2000, result)

        assert transport.call_count == 2
        assert [body["pageNum"] for body in transport.json_bodies()] == [1, 2]
        assert result.pages == 1
        assert result.books == 2
        assert {r.id for r in catalog.list_all()} == {"fg-1001", "fg-1002"}

    def test_skips_page_without_valid_books(
        self, settings: Settings, catalog: BookCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        transport = FakeTransport(
            {
                SEARCH_PATH: [
                    _ok(SEARCH_PAGE_ALL_INVALID),
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                ]
            }
        )
        result = HarvestResult()

        with caplog.at_level(logging.INFO, logger="shelfcount.core.harvester"):
            harvest_range(_source(settings, transport), catalog, 1999, 2000, result)

        assert transport.call_count == 3
        assert result.pages == 2
        assert result.books == 2
        assert "Page 1 had no valid books" in caplog.text

    def test_failure_propagates(self, settings: Settings, catalog: BookCatalog) -> None:
        transport = FakeTransport({SEARCH_PATH: httpx.Response(500)})
        with pytest.raises(FetchError):
            harvest_range(_source(settings, transport), catalog, 1999, 2000, HarvestResult())


class TestHarvestCatalog:
    """Tests for harvest_catalog."""

    def test_failed_range_does_not_stop_the_run(
        self, settings: Settings, catalog: BookCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        transport = FakeTransport(
            {
                SEARCH_PATH: [
                    httpx.Response(502),
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                ]
            }
        )

        with caplog.at_level(logging.ERROR, logger="shelfcount.core.harvester"):
            result = harvest_catalog(
                _source(settings, transport), catalog, [(1999, 2000), (2000, 2001)]
            )

        assert result.books == 2
        assert len(result.failed_ranges) == 1
        from_year, to_year, error = result.failed_ranges[0]
        assert (from_year, to_year) == (1999, 2000)
        assert "502" in error
        assert "Error fetching books for years 1999-2000" in caplog.text

    def test_malformed_page_fails_only_its_range(
        self, settings: Settings, catalog: BookCatalog, caplog: pytest.LogCaptureFixture
    ) -> None:
        transport = FakeTransport(
            {
                SEARCH_PATH: [
                    _ok([]),
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                ]
            }
        )

        with caplog.at_level(logging.ERROR, logger="shelfcount.core.harvester"):
            result = harvest_catalog(
                _source(settings, transport), catalog, [(1999, 2000), (2000, 2001)]
            )

        assert transport.call_count == 3
        assert result.books == 2
        assert [(f, t) for f, t, _ in result.failed_ranges] == [(1999, 2000)]
        assert "not a JSON object" in result.failed_ranges[0][2]
        assert "Error fetching books for years 1999-2000" in caplog.text

    def test_record_without_id_does_not_stop_the_run(
        self, settings: Settings, catalog: BookCatalog
    ) -> None:
        transport = FakeTransport(
            {
                SEARCH_PATH: [
                    _ok(SEARCH_PAGE_RECORD_WITHOUT_ID),
                    _ok(SEARCH_PAGE_EMPTY),
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                ]
            }
        )

        result = harvest_catalog(
            _source(settings, transport), catalog, [(1999, 2000), (2000, 2001)]
        )

        assert result.failed_ranges == []
        assert result.books == 2
        assert {r.id for r in catalog.list_all()} == {"fg-1001", "fg-1002"}

    def test_page_size_is_forwarded(self, settings: Settings, catalog: BookCatalog) -> None:
        transport = FakeTransport({SEARCH_PATH: [_ok(SEARCH_PAGE_EMPTY)]})

        harvest_catalog(_source(settings, transport), catalog, [(2020, 2021)], page_size=10)

        assert transport.json_bodies()[0]["pageSize"] == 10

    def test_rerun_does_not_duplicate(self, settings: Settings, catalog: BookCatalog) -> None:
        transport = FakeTransport(
            {
                SEARCH_PATH: [
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                    _ok(SEARCH_PAGE),
                    _ok(SEARCH_PAGE_EMPTY),
                ]
            }
        )
        source = _source(settings, transport)

        harvest_catalog(source, catalog, [(1999, 2000)])
        harvest_catalog(source, catalog, [(1999, 2000)])

        assert len(catalog.list_all()) == 2
