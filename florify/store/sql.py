"""
Florify — SQL Store

Implements the store contract on top of SQLAlchemy async sessions and the
ORM models in florify.models. One short-lived session per call; writes
commit immediately. There is no cross-call transaction, so a sequence of
writes can stop part way through.

Database errors are re-raised as StoreUnavailableError and are not
retried here.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

import structlog
from sqlalchemy import JSON, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from florify.errors import NotFoundError, StoreUnavailableError
from florify.models import AlertRead, Base, Listing, Order
from florify.store.base import (
    ALERT_READS_TABLE,
    LISTINGS_TABLE,
    ORDERS_TABLE,
    RangeCondition,
    table_schema,
)

logger = structlog.get_logger(__name__)

MODELS: dict[str, type[Base]] = {
    LISTINGS_TABLE: Listing,
    ORDERS_TABLE: Order,
    ALERT_READS_TABLE: AlertRead,
}


def _model_for(table: str) -> type[Base]:
    try:
        return MODELS[table]
    except KeyError:
        raise KeyError(f"Unknown table {table!r}") from None


def _jsonable(value: Any) -> Any:
    """Convert Decimal/datetime leaves so a value fits a JSON column."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _column_values(model: type[Base], item: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only mapped columns; JSON columns get JSON-safe values."""
    values: dict[str, Any] = {}
    for column in model.__table__.columns:
        if column.key not in item:
            continue
        value = item[column.key]
        if isinstance(column.type, JSON):
            value = _jsonable(value)
        values[column.key] = value
    return values


def _identity(table: str, key: Mapping[str, Any]) -> Any:
    key_tuple = table_schema(table).key_of(key)
    return key_tuple[0] if len(key_tuple) == 1 else key_tuple


class SqlStore:
    """Store contract backed by a relational database."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_by_key(self, table: str, key: Mapping[str, Any]) -> dict[str, Any] | None:
        model = _model_for(table)
        try:
            async with self.session_factory() as session:
                row = await session.get(model, _identity(table, key))
                return row.to_item() if row is not None else None
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("get_by_key", table, e) from e

    async def query_by_index(
        self,
        table: str,
        index: str | None,
        key_value: Any,
        range_condition: RangeCondition | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        model = _model_for(table)
        spec = table_schema(table).index(index)
        if range_condition is not None and spec.range_attribute is None:
            raise ValueError(f"Index {index!r} on {table!r} has no range attribute")

        stmt = select(model).where(getattr(model, spec.hash_attribute) == key_value)
        if spec.range_attribute is not None:
            range_column = getattr(model, spec.range_attribute)
            stmt = stmt.where(range_column.isnot(None))
            if range_condition is not None:
                stmt = stmt.where(range_condition.clause(range_column))
            stmt = stmt.order_by(range_column.desc() if descending else range_column.asc())

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("query_by_index", table, e) from e

        logger.debug(
            "sql_store_query",
            table=table,
            index=index,
            rows_found=len(rows),
            source="sql_store",
        )
        return [row.to_item() for row in rows]

    async def scan_all(self, table: str) -> list[dict[str, Any]]:
        model = _model_for(table)
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(model))
                return [row.to_item() for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("scan_all", table, e) from e

    async def put(self, table: str, item: Mapping[str, Any]) -> None:
        model = _model_for(table)
        table_schema(table).key_of(item)
        try:
            async with self.session_factory() as session:
                await session.merge(model(**_column_values(model, item)))
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("put", table, e) from e

    async def update(
        self,
        table: str,
        key: Mapping[str, Any],
        field_updates: Mapping[str, Any],
    ) -> dict[str, Any]:
        model = _model_for(table)
        identity = _identity(table, key)
        try:
            async with self.session_factory() as session:
                row = await session.get(model, identity)
                if row is None:
                    raise NotFoundError(f"No item in {table!r} with key {identity!r}")
                for attr, value in _column_values(model, field_updates).items():
                    setattr(row, attr, value)
                await session.commit()
                await session.refresh(row)
                return row.to_item()
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("update", table, e) from e

    async def delete(self, table: str, key: Mapping[str, Any]) -> None:
        model = _model_for(table)
        try:
            async with self.session_factory() as session:
                row = await session.get(model, _identity(table, key))
                if row is not None:
                    await session.delete(row)
                    await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise self._unavailable("delete", table, e) from e

    @staticmethod
    def _unavailable(operation: str, table: str, error: Exception) -> StoreUnavailableError:
        logger.error(
            "sql_store_error",
            operation=operation,
            table=table,
            error=str(error),
            error_type=type(error).__name__,
            source="sql_store",
        )
        return StoreUnavailableError(f"{operation} on {table!r} failed: {error}")
