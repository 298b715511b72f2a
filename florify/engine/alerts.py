"""
Florify — Price-Alert Evaluator

For one vendor, flags every listing priced above the best competing
price for the same canonical name.

Per vendor listing:
    competitors  = other vendors' listings with the same canonical name
    skip when      no competitors, or your_price <= min(competitor prices)
    lowest       = min(competitor prices)
    average      = mean(competitor prices)
    difference   = your_price - lowest
    percent      = difference / lowest * 100   (0 when lowest == 0)

Each of the vendor's listings is evaluated on its own, so two listings of
the same product can yield two alerts against the same competitor pool.
Results are sorted by percent_above descending; ties keep encounter order.
An empty list means the vendor is fully competitive.
"""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple, Sequence

import structlog

from florify.engine.records import Listing, parse_listings
from florify.store.base import (
    CANONICAL_NAME_INDEX,
    LISTINGS_TABLE,
    VENDOR_INDEX,
    MarketplaceStore,
)

logger = structlog.get_logger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class AlertSnapshot(NamedTuple):
    """One over-priced listing compared against its competitors."""
    canonical_name: str
    your_price: Decimal
    market_average: Decimal
    lowest_market_price: Decimal
    difference: Decimal
    percent_above: Decimal
    listing_id: str


def evaluate_listing(listing: Listing, competitors: Sequence[Listing]) -> AlertSnapshot | None:
    """
    Compare one listing with competing listings of the same product.

    Args:
        listing: The vendor's own listing.
        competitors: Other vendors' listings for the same canonical name.

    Returns:
        AlertSnapshot when the listing is undercut, else None.
    """
    prices = [c.price for c in competitors]
    if not prices:
        return None

    lowest = min(prices)
    if listing.price <= lowest:
        return None

    average = sum(prices, _ZERO) / len(prices)
    difference = listing.price - lowest
    # Zero-priced competitor: no meaningful percentage
    percent_above = difference / lowest * _HUNDRED if lowest > _ZERO else _ZERO

    return AlertSnapshot(
        canonical_name=listing.canonical_name,
        your_price=listing.price,
        market_average=average,
        lowest_market_price=lowest,
        difference=difference,
        percent_above=percent_above,
        listing_id=listing.listing_id,
    )


async def compute_vendor_alerts(store: MarketplaceStore, vendor_id: str) -> list[AlertSnapshot]:
    """
    Evaluate every listing the vendor owns.

    Issues one vendor-index query plus one canonical-name query per
    distinct canonical name. Store failures propagate.
    """
    own_items = await store.query_by_index(LISTINGS_TABLE, VENDOR_INDEX, vendor_id)
    own_listings = parse_listings(own_items)

    competitor_pools: dict[str, list[Listing]] = {}
    alerts: list[AlertSnapshot] = []

    for listing in own_listings:
        name = listing.canonical_name
        if name not in competitor_pools:
            offers = parse_listings(
                await store.query_by_index(LISTINGS_TABLE, CANONICAL_NAME_INDEX, name)
            )
            competitor_pools[name] = [o for o in offers if o.vendor_id != vendor_id]

        snapshot = evaluate_listing(listing, competitor_pools[name])
        if snapshot is not None:
            alerts.append(snapshot)

    alerts.sort(key=lambda a: a.percent_above, reverse=True)

    logger.debug(
        "vendor_alerts_computed",
        vendor_id=vendor_id,
        listings=len(own_listings),
        products=len(competitor_pools),
        alerts=len(alerts),
        source="alerts",
    )
    return alerts
