"""
Florify — Store Records

Validated views over raw store items. Store items are plain dicts and may
be malformed (missing name, NaN or negative price, zero quantity).
Aggregation code parses them through these models and skips the ones that
fail, so a single corrupt row can never take down a catalog or alert view.

All money values are Decimal. Read-state compares prices with exact
equality, so values are never routed through float.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from florify.config import settings

logger = structlog.get_logger(__name__)

# Matches the DECIMAL(18, 6) money columns; finer prices are rejected, never rounded
PRICE_MAX_DIGITS = 18
PRICE_DECIMAL_PLACES = 6


class Listing(BaseModel):
    """One vendor's priced offer of one canonical product."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    listing_id: str = Field(min_length=1)
    canonical_name: str = Field(min_length=1)
    vendor_id: str = Field(min_length=1)
    vendor_name: str = ""
    price: Decimal = Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)
    category: str = settings.DEFAULT_CATEGORY
    color: str = settings.DEFAULT_COLOR
    stems_per_bunch: int = Field(default=settings.DEFAULT_STEMS_PER_BUNCH, gt=0)
    units_per_box: int = Field(default=settings.DEFAULT_UNITS_PER_BOX, gt=0)
    box_type: str = settings.DEFAULT_BOX_TYPE
    created_at: datetime | None = None

    @field_validator(
        "vendor_name", "category", "color", "stems_per_bunch", "units_per_box", "box_type",
        mode="before",
    )
    @classmethod
    def _default_when_missing(cls, value: Any, info: ValidationInfo) -> Any:
        # Older rows may carry NULL descriptive fields
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class OrderItem(BaseModel):
    """Normalized order line. Price is the unit price at time of order."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    listing_id: str = Field(min_length=1)
    vendor_id: str = Field(min_length=1)
    vendor_name: str = Field(min_length=1)
    canonical_name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES)
    quantity: int = Field(gt=0)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Order(BaseModel):
    """Placed purchase."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    order_id: str
    buyer_id: str
    buyer_name: str = ""
    items: list[OrderItem]
    total: Decimal
    status: str
    ordered_at: datetime


def parse_listings(items: Iterable[Mapping[str, Any]]) -> list[Listing]:
    """
    Validate raw listing items, dropping malformed ones.

    Order of the input is preserved.
    """
    listings: list[Listing] = []
    for item in items:
        try:
            listings.append(Listing.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "listing_skipped",
                listing_id=str(item.get("listing_id")),
                errors=[err["loc"] for err in e.errors()],
                source="records",
            )
    return listings


def as_finite_decimal(value: Any) -> Decimal | None:
    """Coerce a stored number to Decimal; None when missing or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def as_positive_int(value: Any) -> int | None:
    """Coerce a stored quantity to int; None unless it is a positive whole number."""
    number = as_finite_decimal(value)
    if number is None or number <= 0 or number != number.to_integral_value():
        return None
    return int(number)
