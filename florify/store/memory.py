"""
Florify — In-Memory Store

Dict-backed implementation of the store contract. Used by the test suite
and local tooling. Items are deep-copied on the way in and out so callers
can never mutate stored state by accident.

Scan order is insertion order. Index queries sort by the index range
attribute; items missing the partition or range attribute are not part
of the index (sparse index semantics).
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

import structlog

from florify.errors import NotFoundError
from florify.store.base import RangeCondition, table_schema

logger = structlog.get_logger(__name__)


class MemoryStore:
    """In-process store keyed by (table, primary key tuple)."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[tuple[Any, ...], dict[str, Any]]] = {}

    def _table(self, table: str) -> dict[tuple[Any, ...], dict[str, Any]]:
        table_schema(table)
        return self._tables.setdefault(table, {})

    async def get_by_key(self, table: str, key: Mapping[str, Any]) -> dict[str, Any] | None:
        item = self._table(table).get(table_schema(table).key_of(key))
        return copy.deepcopy(item) if item is not None else None

    async def query_by_index(
        self,
        table: str,
        index: str | None,
        key_value: Any,
        range_condition: RangeCondition | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        spec = table_schema(table).index(index)
        if range_condition is not None and spec.range_attribute is None:
            raise ValueError(f"Index {index!r} on {table!r} has no range attribute")
        matches = []
        for item in self._table(table).values():
            if item.get(spec.hash_attribute) != key_value:
                continue
            if spec.range_attribute is not None:
                range_value = item.get(spec.range_attribute)
                if range_value is None:
                    continue
                if range_condition is not None and not range_condition.matches(range_value):
                    continue
            matches.append(item)

        if spec.range_attribute is not None:
            try:
                matches.sort(key=lambda i: i[spec.range_attribute], reverse=descending)
            except (TypeError, ArithmeticError):
                # Unorderable range values (e.g. NaN Decimal): keep insertion order
                logger.warning(
                    "memory_store_unsortable_index",
                    table=table,
                    index=index,
                    source="memory_store",
                )

        return copy.deepcopy(matches)

    async def scan_all(self, table: str) -> list[dict[str, Any]]:
        return copy.deepcopy(list(self._table(table).values()))

    async def put(self, table: str, item: Mapping[str, Any]) -> None:
        key = table_schema(table).key_of(item)
        self._table(table)[key] = copy.deepcopy(dict(item))

    async def update(
        self,
        table: str,
        key: Mapping[str, Any],
        field_updates: Mapping[str, Any],
    ) -> dict[str, Any]:
        rows = self._table(table)
        key_tuple = table_schema(table).key_of(key)
        if key_tuple not in rows:
            raise NotFoundError(f"No item in {table!r} with key {key_tuple!r}")
        rows[key_tuple].update(copy.deepcopy(dict(field_updates)))
        return copy.deepcopy(rows[key_tuple])

    async def delete(self, table: str, key: Mapping[str, Any]) -> None:
        self._table(table).pop(table_schema(table).key_of(key), None)
