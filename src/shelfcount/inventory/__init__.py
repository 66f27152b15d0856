# ABOUTME: Inventory sampling and checkout inference.
# ABOUTME: Exports the fetcher, the batch runner, the inference function, and core types.

from shelfcount.inventory.fetcher import InventoryFetcher
from shelfcount.inventory.inference import checkout_delta, infer_checkouts
from shelfcount.inventory.runner import InventoryRunner, InventoryStore, partition
from shelfcount.inventory.types import (
    BatchReport,
    CheckoutEvent,
    FetchResult,
    InventoryItem,
    InventoryRunResult,
    TransientFetchError,
)

__all__ = [
    "BatchReport",
    "CheckoutEvent",
    "FetchResult",
    "InventoryFetcher",
    "InventoryItem",
    "InventoryRunResult",
    "InventoryRunner",
    "InventoryStore",
    "TransientFetchError",
    "checkout_delta",
    "infer_checkouts",
    "partition",
]
