"""
Florify — Catalog Aggregator

Folds every listing into one summary per canonical name:

    lowest_price  = min(price) over all listings with that name
    vendor_count  = number of listings with that name (NOT distinct vendors;
                    a vendor listing the same product twice counts twice)

Descriptive fields (category, color, stems_per_bunch, units_per_box,
box_type) are first-seen wins: they come from the first listing
encountered in scan order and are not reconciled across vendors.

The per-product detail view returns offers in the store's native index
order. Sorting for "best price first" display is the caller's job.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, NamedTuple

import structlog

from florify.engine.records import Listing, parse_listings
from florify.errors import NotFoundError
from florify.store.base import CANONICAL_NAME_INDEX, LISTINGS_TABLE, MarketplaceStore

logger = structlog.get_logger(__name__)


class CatalogSummary(NamedTuple):
    """Buyer-facing summary of one canonical product."""
    canonical_name: str
    lowest_price: Decimal
    vendor_count: int
    category: str
    color: str
    stems_per_bunch: int
    units_per_box: int
    box_type: str


class ProductOffer(NamedTuple):
    """One vendor's offer as shown on a product detail page."""
    listing_id: str
    vendor_id: str
    vendor_name: str
    price: Decimal
    stems_per_bunch: int
    units_per_box: int
    box_type: str
    category: str
    color: str


class ProductDetail(NamedTuple):
    canonical_name: str
    category: str
    color: str
    offers: list[ProductOffer]


def build_catalog(listings: Iterable[Listing]) -> dict[str, CatalogSummary]:
    """
    Group listings by canonical name.

    Args:
        listings: Validated listings in scan order.

    Returns:
        Insertion-ordered mapping canonical_name -> CatalogSummary.
    """
    catalog: dict[str, CatalogSummary] = {}
    for listing in listings:
        existing = catalog.get(listing.canonical_name)
        if existing is None:
            catalog[listing.canonical_name] = CatalogSummary(
                canonical_name=listing.canonical_name,
                lowest_price=listing.price,
                vendor_count=1,
                category=listing.category,
                color=listing.color,
                stems_per_bunch=listing.stems_per_bunch,
                units_per_box=listing.units_per_box,
                box_type=listing.box_type,
            )
        else:
            catalog[listing.canonical_name] = existing._replace(
                vendor_count=existing.vendor_count + 1,
                lowest_price=min(existing.lowest_price, listing.price),
            )
    return catalog


async def load_catalog(store: MarketplaceStore) -> dict[str, CatalogSummary]:
    """Scan every listing and fold it into the catalog mapping."""
    items = await store.scan_all(LISTINGS_TABLE)
    catalog = build_catalog(parse_listings(items))
    logger.debug(
        "catalog_built",
        listings_scanned=len(items),
        products=len(catalog),
        source="catalog",
    )
    return catalog


async def list_catalog(store: MarketplaceStore) -> list[CatalogSummary]:
    return list((await load_catalog(store)).values())


def _to_offer(listing: Listing) -> ProductOffer:
    return ProductOffer(
        listing_id=listing.listing_id,
        vendor_id=listing.vendor_id,
        vendor_name=listing.vendor_name,
        price=listing.price,
        stems_per_bunch=listing.stems_per_bunch,
        units_per_box=listing.units_per_box,
        box_type=listing.box_type,
        category=listing.category,
        color=listing.color,
    )


async def get_product_detail(store: MarketplaceStore, canonical_name: str) -> ProductDetail:
    """
    Collect every offer for one canonical name.

    Raises:
        NotFoundError: No listing carries this canonical name.
    """
    items = await store.query_by_index(LISTINGS_TABLE, CANONICAL_NAME_INDEX, canonical_name)
    offers = [_to_offer(listing) for listing in parse_listings(items)]

    if not offers:
        logger.info("product_not_found", canonical_name=canonical_name, source="catalog")
        raise NotFoundError(f"Product not found: {canonical_name!r}")

    return ProductDetail(
        canonical_name=canonical_name,
        category=offers[0].category,
        color=offers[0].color,
        offers=offers,
    )
