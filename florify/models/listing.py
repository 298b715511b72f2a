"""
Florify — Listing Model

One vendor's priced offer of one canonical product. A vendor may hold
several listings under the same canonical name; they are not deduplicated.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, INTEGER, TIMESTAMP, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from florify.models.base import Base


class Listing(Base):
    """
    Vendor listing row.

    Backs the `canonical_name-index` (canonical_name, price) and
    `vendor_id-index` (vendor_id, canonical_name) store indexes.
    """

    __tablename__ = "listings"

    listing_id: Mapped[str] = mapped_column(
        String, primary_key=True, comment="Globally unique, immutable listing identifier"
    )
    canonical_name: Mapped[str] = mapped_column(
        String, nullable=False, comment="Normalized product name shared across vendors"
    )
    vendor_id: Mapped[str] = mapped_column(
        String, nullable=False, comment="Owning vendor"
    )
    vendor_name: Mapped[str] = mapped_column(
        String, nullable=False, default="", comment="Vendor display name"
    )
    price: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 6), nullable=False, comment="Current asking price"
    )
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    stems_per_bunch: Mapped[int | None] = mapped_column(INTEGER, nullable=True)
    units_per_box: Mapped[int | None] = mapped_column(INTEGER, nullable=True)
    box_type: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="Box type code, e.g. EB, QB, HB"
    )
    created_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_listings_canonical_price", "canonical_name", "price"),
        Index("ix_listings_vendor_canonical", "vendor_id", "canonical_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<Listing id={self.listing_id!r} name={self.canonical_name!r} "
            f"vendor={self.vendor_id!r} price={self.price}>"
        )
