"""
Florify — Listing Store Contract

The marketplace core never talks to a database directly. It is handed a
store that behaves like a key-value table with secondary indexes:

    get_by_key(table, key)                          -> item | None
    query_by_index(table, index, key_value, range)  -> list[item]
    scan_all(table)                                 -> list[item]
    put(table, item)
    update(table, key, field_updates)               -> item
    delete(table, key)

Items are plain dicts keyed by snake_case attribute names. Query results
come back in the index's native order (ascending by the index range
attribute, or descending when asked). Callers must not assume that order
is meaningful beyond that.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Mapping, NamedTuple, Protocol

# ---------------------------------------------------------------------------
# Table & index names
# ---------------------------------------------------------------------------

LISTINGS_TABLE = "listings"
ORDERS_TABLE = "orders"
ALERT_READS_TABLE = "alert_reads"

CANONICAL_NAME_INDEX = "canonical_name-index"
VENDOR_INDEX = "vendor_id-index"
BUYER_INDEX = "buyer_id-index"


class IndexSchema(NamedTuple):
    """Partition (hash) attribute and sort (range) attribute of an index."""
    hash_attribute: str
    range_attribute: str | None = None


class TableSchema(NamedTuple):
    """Primary key attributes plus secondary indexes of one table."""
    key_attributes: tuple[str, ...]
    primary_index: IndexSchema
    indexes: dict[str, IndexSchema]

    def index(self, name: str | None) -> IndexSchema:
        """Resolve an index name; None means the table's own key."""
        if name is None:
            return self.primary_index
        try:
            return self.indexes[name]
        except KeyError:
            raise KeyError(f"Unknown index {name!r}") from None

    def key_of(self, item: Mapping[str, Any]) -> tuple[Any, ...]:
        """Extract the primary key tuple from an item or key mapping."""
        try:
            return tuple(item[attr] for attr in self.key_attributes)
        except KeyError as e:
            raise KeyError(f"Missing key attribute {e.args[0]!r}") from None


TABLES: dict[str, TableSchema] = {
    LISTINGS_TABLE: TableSchema(
        key_attributes=("listing_id",),
        primary_index=IndexSchema("listing_id"),
        indexes={
            CANONICAL_NAME_INDEX: IndexSchema("canonical_name", "price"),
            VENDOR_INDEX: IndexSchema("vendor_id", "canonical_name"),
        },
    ),
    ORDERS_TABLE: TableSchema(
        key_attributes=("order_id",),
        primary_index=IndexSchema("order_id"),
        indexes={
            BUYER_INDEX: IndexSchema("buyer_id", "ordered_at"),
        },
    ),
    ALERT_READS_TABLE: TableSchema(
        key_attributes=("vendor_id", "canonical_name"),
        primary_index=IndexSchema("vendor_id", "canonical_name"),
        indexes={},
    ),
}


def table_schema(table: str) -> TableSchema:
    try:
        return TABLES[table]
    except KeyError:
        raise KeyError(f"Unknown table {table!r}") from None


# ---------------------------------------------------------------------------
# Range conditions
# ---------------------------------------------------------------------------

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "lt": operator.lt,
    "lte": operator.le,
    "gt": operator.gt,
    "gte": operator.ge,
}


class RangeCondition(NamedTuple):
    """
    Condition on an index's range attribute.

    op is one of: eq, lt, lte, gt, gte, between, begins_with.
    `upper` is only used by between (inclusive on both ends).
    """
    op: str
    value: Any
    upper: Any = None

    @classmethod
    def equals(cls, value: Any) -> "RangeCondition":
        return cls("eq", value)

    @classmethod
    def between(cls, lower: Any, upper: Any) -> "RangeCondition":
        return cls("between", lower, upper)

    def matches(self, candidate: Any) -> bool:
        """Evaluate the condition against a Python value."""
        if candidate is None:
            return False
        if self.op in _COMPARATORS:
            return _COMPARATORS[self.op](candidate, self.value)
        if self.op == "between":
            return self.value <= candidate <= self.upper
        if self.op == "begins_with":
            return str(candidate).startswith(str(self.value))
        raise ValueError(f"Unsupported range operator {self.op!r}")

    def clause(self, column: Any) -> Any:
        """Translate the condition into a SQLAlchemy column expression."""
        if self.op in _COMPARATORS:
            return _COMPARATORS[self.op](column, self.value)
        if self.op == "between":
            return column.between(self.value, self.upper)
        if self.op == "begins_with":
            return column.startswith(str(self.value))
        raise ValueError(f"Unsupported range operator {self.op!r}")


# ---------------------------------------------------------------------------
# Store protocol
# ---------------------------------------------------------------------------


class MarketplaceStore(Protocol):
    """Async key-value store with secondary indexes."""

    async def get_by_key(self, table: str, key: Mapping[str, Any]) -> dict[str, Any] | None:
        ...

    async def query_by_index(
        self,
        table: str,
        index: str | None,
        key_value: Any,
        range_condition: RangeCondition | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Items whose index partition attribute equals key_value, sorted by the
        index range attribute. index=None queries the table's own key.

        Raises:
            KeyError: Unknown table or index.
            ValueError: range_condition given for an index without a range attribute.
        """

    async def scan_all(self, table: str) -> list[dict[str, Any]]:
        ...

    async def put(self, table: str, item: Mapping[str, Any]) -> None:
        ...

    async def update(
        self,
        table: str,
        key: Mapping[str, Any],
        field_updates: Mapping[str, Any],
    ) -> dict[str, Any]:
        ...

    async def delete(self, table: str, key: Mapping[str, Any]) -> None:
        ...
