"""
Florify — Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- In-memory store (dict-backed)
- SQL store on an aiosqlite in-memory database
- Listing / order item builders
- Async test support via pytest-asyncio
"""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, AsyncGenerator, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from florify.models.base import Base
from florify.store.memory import MemoryStore
from florify.store.sql import SqlStore


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)


# ---------------------------------------------------------------------------
# Store Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest_asyncio.fixture
async def sql_session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory over a fresh in-memory SQLite database.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def sql_store(sql_session_factory) -> SqlStore:
    return SqlStore(sql_session_factory)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _as_price(value: Any) -> Any:
    """Numbers and numeric strings become Decimal; anything else is kept as-is."""
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return value
    return value


@pytest.fixture
def make_listing() -> Callable[..., dict[str, Any]]:
    """Build a raw listing item; ids are sequential per test."""
    counter = itertools.count(1)

    def _make(
        vendor_id: str,
        canonical_name: str,
        price: Any,
        **overrides: Any,
    ) -> dict[str, Any]:
        item = {
            "listing_id": f"lst-{next(counter):03d}",
            "canonical_name": canonical_name,
            "vendor_id": vendor_id,
            "vendor_name": f"Vendor {vendor_id}",
            "price": _as_price(price),
            "category": "Roses",
            "color": "Red",
            "stems_per_bunch": 25,
            "units_per_box": 4,
            "box_type": "QB",
            "created_at": datetime(2026, 10, 1, tzinfo=timezone.utc),
        }
        item.update(overrides)
        return item

    return _make


@pytest.fixture
def make_order_item() -> Callable[..., dict[str, Any]]:
    def _make(canonical_name: str, quantity: Any, price: Any = "10.00", **overrides: Any) -> dict[str, Any]:
        item = {
            "listing_id": "lst-x",
            "vendor_id": "v-x",
            "vendor_name": "Vendor X",
            "canonical_name": canonical_name,
            "price": price,
            "quantity": quantity,
        }
        item.update(overrides)
        return item

    return _make
