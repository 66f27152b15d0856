# ABOUTME: Core data structures for inventory sampling and checkout inference.
# ABOUTME: Items, per-item fetch outcomes, inferred checkout events, and run summaries.

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class InventoryItem:
    """A tracked record and its last persisted availability count.

    previous is None when the record has never been sampled successfully.
    """

    id: str
    previous: int | None = None


class TransientFetchError(Exception):
    """A single item's availability could not be read this run."""


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one availability fetch: an observed count or an error.

    Exactly one of count and error is set. A failed fetch means "unknown",
    never zero.
    """

    id: str
    count: int | None = None
    error: TransientFetchError | None = None

    def __post_init__(self) -> None:
        if (self.count is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of count or error")
        if self.count is not None and self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, item_id: str, count: int) -> "FetchResult":
        return cls(id=item_id, count=count)

    @classmethod
    def failure(cls, item_id: str, error: TransientFetchError) -> "FetchResult":
        return cls(id=item_id, error=error)


@dataclass(frozen=True)
class CheckoutEvent:
    """One unit of availability that disappeared between two samples."""

    book_id: str
    timestamp: datetime


@dataclass
class BatchReport:
    """What happened to one committed batch."""

    index: int
    size: int
    succeeded: int = 0
    failed: int = 0
    checkouts: int = 0


@dataclass
class InventoryRunResult:
    """Summary of a full inventory run."""

    total_items: int = 0
    batches: list[BatchReport] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(batch.succeeded for batch in self.batches)

    @property
    def failed(self) -> int:
        return sum(batch.failed for batch in self.batches)

    @property
    def checkouts(self) -> int:
        return sum(batch.checkouts for batch in self.batches)
