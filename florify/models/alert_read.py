"""
Florify — Alert Read Model

Acknowledgement state for vendor price alerts, one row per
(vendor_id, canonical_name). The alert counts as read only while the
vendor's current price equals read_at_price. Rows are never deleted;
stale rows for names that no longer alert are ignored.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, TIMESTAMP, String
from sqlalchemy.orm import Mapped, mapped_column

from florify.models.base import Base


class AlertRead(Base):
    """Last acknowledged price for one vendor/product alert."""

    __tablename__ = "alert_reads"

    vendor_id: Mapped[str] = mapped_column(String, primary_key=True)
    canonical_name: Mapped[str] = mapped_column(String, primary_key=True)
    read_at_price: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 6),
        nullable=False,
        comment="Vendor price at the moment the alert was acknowledged",
    )
    read_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<AlertRead vendor={self.vendor_id!r} name={self.canonical_name!r} "
            f"price={self.read_at_price}>"
        )
