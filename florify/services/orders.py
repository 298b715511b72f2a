"""
Florify — Order Placement

Normalizes checkout line items into OrderItem records and stores the
order. The trending ranker later reads these orders back.

Validation (all-or-nothing for one order):
- at least one line item
- listing_id, vendor_id, vendor_name, canonical_name present
- price finite and >= 0
- quantity a positive whole number

total = sum(price × quantity) over the line items.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Sequence

import structlog
from pydantic import ValidationError

from florify.config import settings
from florify.engine.records import Order, OrderItem
from florify.errors import InvalidInputError
from florify.store.base import BUYER_INDEX, ORDERS_TABLE, MarketplaceStore

logger = structlog.get_logger(__name__)


def normalize_order_items(items: Sequence[Mapping[str, Any]] | None) -> list[OrderItem]:
    """
    Validate raw line items.

    Raises:
        InvalidInputError: No items, or any item fails validation.
    """
    if not items:
        raise InvalidInputError("Order items are required")

    normalized: list[OrderItem] = []
    for position, item in enumerate(items):
        try:
            normalized.append(OrderItem.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "order_item_rejected",
                position=position,
                errors=[err["loc"] for err in e.errors()],
                source="orders",
            )
            raise InvalidInputError("Invalid order items payload") from e
    return normalized


async def place_order(
    store: MarketplaceStore,
    buyer_id: str,
    buyer_name: str,
    items: Sequence[Mapping[str, Any]] | None,
) -> Order:
    """Validate, total and persist a new order with status 'placed'."""
    line_items = normalize_order_items(items)
    total = sum((item.subtotal for item in line_items), Decimal("0"))

    order = Order(
        order_id=str(uuid.uuid4()),
        buyer_id=buyer_id,
        buyer_name=buyer_name,
        items=line_items,
        total=total,
        status=settings.ORDER_STATUS_PLACED,
        ordered_at=datetime.now(timezone.utc),
    )
    await store.put(ORDERS_TABLE, order.model_dump())

    logger.info(
        "order_placed",
        order_id=order.order_id,
        buyer_id=buyer_id,
        line_items=len(line_items),
        total=str(total),
        source="orders",
    )
    return order


async def list_orders(store: MarketplaceStore, buyer_id: str) -> list[Order]:
    """The buyer's orders, newest first. Malformed rows are skipped."""
    items = await store.query_by_index(ORDERS_TABLE, BUYER_INDEX, buyer_id, descending=True)
    orders: list[Order] = []
    for item in items:
        try:
            orders.append(Order.model_validate(item))
        except ValidationError:
            logger.warning("order_skipped", order_id=str(item.get("order_id")), source="orders")
    return orders
