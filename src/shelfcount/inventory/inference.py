# ABOUTME: Infers checkout events from drops in a record's available count.
# ABOUTME: Pure functions: one event per unit of decrease, nothing on increases.

from datetime import datetime

from shelfcount.inventory.types import CheckoutEvent


def checkout_delta(previous: int | None, observed: int) -> int:
    """Number of units that went out between two samples.

    An unknown previous count counts as zero, so a first sample never
    produces checkouts.
    """
    return max(0, (previous or 0) - observed)


def infer_checkouts(
    book_id: str,
    previous: int | None,
    observed: int,
    at: datetime,
) -> list[CheckoutEvent]:
    """Synthesize one CheckoutEvent per unit of availability decrease.

    All events share the timestamp at which the drop was observed.

    >>> from datetime import datetime
    >>> len(infer_checkouts("b1", 3, 1, datetime(2024, 1, 1)))
    2
    >>> infer_checkouts("b1", 1, 4, datetime(2024, 1, 1))
    []
    """
    if observed < 0:
        raise ValueError(f"observed count must be non-negative, got {observed}")
    return [CheckoutEvent(book_id=book_id, timestamp=at)] * checkout_delta(previous, observed)
