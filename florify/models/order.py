"""
Florify — Order Model

Placed purchases. Line items are stored inline as JSON, exactly as the
order was normalized at checkout. Read-only input to the trending ranker.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, JSON, TIMESTAMP, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from florify.models.base import Base


class Order(Base):
    """Buyer order with inline line items."""

    __tablename__ = "orders"

    order_id: Mapped[str] = mapped_column(String, primary_key=True)
    buyer_id: Mapped[str] = mapped_column(String, nullable=False)
    buyer_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    items: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="[{listing_id, vendor_id, vendor_name, canonical_name, price, quantity}]",
    )
    total: Mapped[Decimal] = mapped_column(DECIMAL(20, 6), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    ordered_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_orders_buyer_ordered", "buyer_id", "ordered_at"),
    )

    def __repr__(self) -> str:
        return f"<Order id={self.order_id!r} buyer={self.buyer_id!r} total={self.total}>"
