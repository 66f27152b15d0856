# ABOUTME: Drives availability fetches over the whole catalog in committed batches.
# ABOUTME: Caps outstanding requests with a thread pool and persists after every batch.

import logging
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Protocol

from shelfcount.inventory.inference import infer_checkouts
from shelfcount.inventory.types import (
    BatchReport,
    CheckoutEvent,
    FetchResult,
    InventoryItem,
    InventoryRunResult,
    TransientFetchError,
)

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can read a record's current available count."""

    def fetch(self, book_id: str) -> FetchResult: ...


class InventoryStore(Protocol):
    """Persistence the runner reads its baseline from and commits batches to."""

    def load_inventory_snapshot(self) -> list[InventoryItem]: ...

    def commit_inventory_batch(
        self,
        counts: list[tuple[str, int]],
        checkouts: list[CheckoutEvent],
    ) -> None: ...


Clock = Callable[[], datetime]
BatchCallback = Callable[[BatchReport, int], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def partition(items: Sequence[InventoryItem], size: int) -> Iterator[list[InventoryItem]]:
    """Split items into contiguous batches of at most size; the last may be shorter."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class InventoryRunner:
    """Samples availability for every tracked book and infers checkouts.

    Batches run strictly one after another. Inside a batch at most
    concurrency_limit fetches are in flight; the batch is committed only once
    every item in it has an outcome. Fetch failures are logged and skipped,
    leaving the stored count untouched. A commit failure stops the run;
    batches committed before it stay committed.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: InventoryStore,
        *,
        concurrency_limit: int = 5,
        batch_size: int = 50,
        clock: Clock = _utcnow,
        on_batch: BatchCallback | None = None,
    ) -> None:
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._fetcher = fetcher
        self._store = store
        self._concurrency_limit = concurrency_limit
        self._batch_size = batch_size
        self._clock = clock
        self._on_batch = on_batch

    def run(self) -> InventoryRunResult:
        """Load the snapshot and process it.

        Raises:
            FatalStartupError: If the store cannot produce a snapshot.
            PersistenceError: If a batch cannot be committed.
        """
        items = self._store.load_inventory_snapshot()
        logger.info("Found %d books to process", len(items))
        return self.process(items)

    def process(self, items: Sequence[InventoryItem]) -> InventoryRunResult:
        """Fetch, infer, and commit the given items batch by batch."""
        result = InventoryRunResult(total_items=len(items))
        processed = 0

        with ThreadPoolExecutor(
            max_workers=self._concurrency_limit,
            thread_name_prefix="inventory",
        ) as executor:
            for index, batch in enumerate(partition(items, self._batch_size)):
                outcomes = self._fetch_batch(executor, batch)
                try:
                    report = self._commit_batch(index, outcomes, result)
                except Exception:
                    logger.error(
                        "Batch %d could not be committed; stopping after %d of %d books",
                        index + 1,
                        processed,
                        len(items),
                    )
                    raise

                result.batches.append(report)
                processed += report.size
                logger.info("Processed %d of %d books", processed, len(items))
                if self._on_batch is not None:
                    self._on_batch(report, len(items))

        logger.info(
            "Finished updating inventory: %d updated, %d failed, %d checkout(s)",
            result.succeeded,
            result.failed,
            result.checkouts,
        )
        return result

    def _fetch_batch(
        self, executor: Executor, batch: list[InventoryItem]
    ) -> list[tuple[InventoryItem, FetchResult]]:
        """Run every fetch in the batch and wait for all of them.

        Outcomes come back in completion order, not input order.
        """
        futures = {executor.submit(self._fetcher.fetch, item.id): item for item in batch}
        outcomes: list[tuple[InventoryItem, FetchResult]] = []

        for future in as_completed(futures):
            item = futures[future]
            try:
                outcome = future.result()
            except Exception as exc:
                # Fetchers are expected to return failures; treat a raise the same way.
                logger.exception("Unexpected error fetching %s", item.id)
                outcome = FetchResult.failure(item.id, TransientFetchError(str(exc)))
            outcomes.append((item, outcome))

        return outcomes

    def _commit_batch(
        self,
        index: int,
        outcomes: list[tuple[InventoryItem, FetchResult]],
        result: InventoryRunResult,
    ) -> BatchReport:
        report = BatchReport(index=index, size=len(outcomes))
        inferred_at = self._clock()
        counts: list[tuple[str, int]] = []
        checkouts: list[CheckoutEvent] = []

        for item, outcome in outcomes:
            if outcome.count is None:
                logger.warning("Skipping %s: %s", item.id, outcome.error)
                report.failed += 1
                result.failed_ids.append(item.id)
                continue

            report.succeeded += 1
            counts.append((item.id, outcome.count))
            checkouts.extend(infer_checkouts(item.id, item.previous, outcome.count, inferred_at))

        self._store.commit_inventory_batch(counts, checkouts)

        report.checkouts = len(checkouts)
        if checkouts:
            logger.info("Recorded %d new checkouts", len(checkouts))
        return report
