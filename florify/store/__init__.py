from florify.store.base import (
    ALERT_READS_TABLE,
    BUYER_INDEX,
    CANONICAL_NAME_INDEX,
    LISTINGS_TABLE,
    ORDERS_TABLE,
    VENDOR_INDEX,
    MarketplaceStore,
    RangeCondition,
)
from florify.store.memory import MemoryStore
from florify.store.sql import SqlStore

__all__ = [
    "ALERT_READS_TABLE",
    "BUYER_INDEX",
    "CANONICAL_NAME_INDEX",
    "LISTINGS_TABLE",
    "ORDERS_TABLE",
    "VENDOR_INDEX",
    "MarketplaceStore",
    "MemoryStore",
    "RangeCondition",
    "SqlStore",
]
