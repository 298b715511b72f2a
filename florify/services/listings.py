"""
Florify — Vendor Listing Management

Create, read, update and delete a vendor's own listings. A vendor may only
modify or delete listings it owns; everything else about authorization
belongs to the surrounding application.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from pydantic import ValidationError

from florify.config import settings
from florify.engine.records import Listing, parse_listings
from florify.errors import InvalidInputError, NotFoundError, OwnershipError
from florify.store.base import LISTINGS_TABLE, VENDOR_INDEX, MarketplaceStore

logger = structlog.get_logger(__name__)

# Fields a vendor may change after creation
UPDATABLE_FIELDS = frozenset({
    "price",
    "canonical_name",
    "category",
    "color",
    "stems_per_bunch",
    "units_per_box",
    "box_type",
})


def _validate(item: dict[str, Any]) -> Listing:
    try:
        return Listing.model_validate(item)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise InvalidInputError(f"Invalid listing fields: {', '.join(fields)}") from e


async def create_listing(
    store: MarketplaceStore,
    vendor_id: str,
    vendor_name: str,
    canonical_name: str,
    price: Decimal | int | str | None,
    category: str | None = None,
    color: str | None = None,
    stems_per_bunch: int | None = None,
    units_per_box: int | None = None,
    box_type: str | None = None,
) -> Listing:
    """
    Publish a new listing for the vendor.

    Omitted descriptive fields fall back to the configured defaults.

    Raises:
        InvalidInputError: canonical_name or price missing, or a value fails validation.
    """
    canonical_name = (canonical_name or "").strip()
    if not canonical_name or price is None:
        raise InvalidInputError("canonical_name and price are required")

    listing = _validate({
        "listing_id": str(uuid.uuid4()),
        "canonical_name": canonical_name,
        "vendor_id": vendor_id,
        "vendor_name": vendor_name,
        "price": price,
        "category": category or settings.DEFAULT_CATEGORY,
        "color": color or settings.DEFAULT_COLOR,
        "stems_per_bunch": stems_per_bunch or settings.DEFAULT_STEMS_PER_BUNCH,
        "units_per_box": units_per_box or settings.DEFAULT_UNITS_PER_BOX,
        "box_type": box_type or settings.DEFAULT_BOX_TYPE,
        "created_at": datetime.now(timezone.utc),
    })
    await store.put(LISTINGS_TABLE, listing.model_dump())

    logger.info(
        "listing_created",
        listing_id=listing.listing_id,
        vendor_id=vendor_id,
        canonical_name=canonical_name,
        price=str(listing.price),
        source="listings",
    )
    return listing


async def list_vendor_listings(store: MarketplaceStore, vendor_id: str) -> list[Listing]:
    items = await store.query_by_index(LISTINGS_TABLE, VENDOR_INDEX, vendor_id)
    return parse_listings(items)


async def _owned_item(store: MarketplaceStore, vendor_id: str, listing_id: str) -> dict[str, Any]:
    item = await store.get_by_key(LISTINGS_TABLE, {"listing_id": listing_id})
    if item is None:
        raise NotFoundError(f"Listing not found: {listing_id!r}")
    if item.get("vendor_id") != vendor_id:
        logger.warning(
            "listing_ownership_denied",
            listing_id=listing_id,
            vendor_id=vendor_id,
            source="listings",
        )
        raise OwnershipError(f"Listing {listing_id!r} belongs to another vendor")
    return item


async def update_listing(
    store: MarketplaceStore,
    vendor_id: str,
    listing_id: str,
    /,
    **fields: Any,
) -> Listing:
    """
    Apply a partial update to one of the vendor's listings.

    Fields passed as None are ignored. A price change here is what
    implicitly un-reads an acknowledged price alert.

    Raises:
        InvalidInputError: Unknown field, nothing to update, or invalid value.
        NotFoundError: No listing with this id.
        OwnershipError: The listing belongs to another vendor.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidInputError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    updates = {key: value for key, value in fields.items() if value is not None}
    if not updates:
        raise InvalidInputError("No fields to update")

    existing = await _owned_item(store, vendor_id, listing_id)
    validated = _validate({**existing, **updates})
    clean_updates = {key: getattr(validated, key) for key in updates}

    updated = await store.update(LISTINGS_TABLE, {"listing_id": listing_id}, clean_updates)

    logger.info(
        "listing_updated",
        listing_id=listing_id,
        vendor_id=vendor_id,
        fields=sorted(clean_updates),
        source="listings",
    )
    return _validate(updated)


async def delete_listing(store: MarketplaceStore, vendor_id: str, listing_id: str) -> None:
    """
    Remove one of the vendor's listings.

    Raises:
        NotFoundError: No listing with this id.
        OwnershipError: The listing belongs to another vendor.
    """
    await _owned_item(store, vendor_id, listing_id)
    await store.delete(LISTINGS_TABLE, {"listing_id": listing_id})
    logger.info("listing_deleted", listing_id=listing_id, vendor_id=vendor_id, source="listings")
