"""
Florify — Trending Ranker

Ranks up to TRENDING_LIMIT products by recent market interest.

    Sales branch:    any order history exists
                     -> rank by total units sold, descending
                     -> names with sales but no current listing are dropped
    Fallback branch: no sales anywhere
                     -> rank by vendor_count desc, then lowest_price asc
                     -> total_sold reported as 0

Both branches return the same TrendingProduct shape, so a cold system with
listings but no orders still gets a non-empty trending section.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Mapping, NamedTuple

import structlog

from florify.config import settings
from florify.engine.catalog import CatalogSummary, load_catalog
from florify.engine.records import as_positive_int
from florify.store.base import ORDERS_TABLE, MarketplaceStore

logger = structlog.get_logger(__name__)


class TrendingProduct(NamedTuple):
    canonical_name: str
    total_sold: int
    lowest_price: Decimal
    vendor_count: int
    category: str
    color: str
    stems_per_bunch: int
    units_per_box: int
    box_type: str


def tally_units_sold(orders: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """
    Sum quantity sold per canonical name across all orders.

    Line items with an empty canonical name or a quantity that is not a
    positive whole number are skipped. Orders whose items field is not a
    list contribute nothing.
    """
    sold: dict[str, int] = {}
    skipped = 0
    for order in orders:
        items = order.get("items")
        if not isinstance(items, list):
            continue
        for item in items:
            if not isinstance(item, Mapping):
                skipped += 1
                continue
            canonical_name = str(item.get("canonical_name") or "")
            quantity = as_positive_int(item.get("quantity"))
            if not canonical_name or quantity is None:
                skipped += 1
                continue
            sold[canonical_name] = sold.get(canonical_name, 0) + quantity

    if skipped:
        logger.debug("order_items_skipped", count=skipped, source="trending")
    return sold


def _with_sales(summary: CatalogSummary, total_sold: int) -> TrendingProduct:
    return TrendingProduct(
        canonical_name=summary.canonical_name,
        total_sold=total_sold,
        lowest_price=summary.lowest_price,
        vendor_count=summary.vendor_count,
        category=summary.category,
        color=summary.color,
        stems_per_bunch=summary.stems_per_bunch,
        units_per_box=summary.units_per_box,
        box_type=summary.box_type,
    )


def rank_trending(
    catalog: Mapping[str, CatalogSummary],
    sold: Mapping[str, int],
    limit: int | None = None,
) -> list[TrendingProduct]:
    """
    Pick the top products from a catalog and a sales tally.

    Args:
        catalog: canonical_name -> CatalogSummary (see build_catalog).
        sold: canonical_name -> units sold (see tally_units_sold).
        limit: Maximum results (default: TRENDING_LIMIT).

    Returns:
        Ranked TrendingProduct list. Ties keep their encounter order.
    """
    limit = limit if limit is not None else settings.TRENDING_LIMIT

    if sold:
        ranked = sorted(sold.items(), key=lambda entry: entry[1], reverse=True)
        products = [
            _with_sales(catalog[name], total)
            for name, total in ranked
            if name in catalog
        ]
        orphaned = sum(1 for name in sold if name not in catalog)
        if orphaned:
            logger.debug("trending_orphaned_names_dropped", count=orphaned, source="trending")
        return products[:limit]

    ranked_summaries = sorted(
        catalog.values(),
        key=lambda s: (-s.vendor_count, s.lowest_price),
    )
    return [_with_sales(summary, 0) for summary in ranked_summaries[:limit]]


async def list_trending(store: MarketplaceStore, limit: int | None = None) -> list[TrendingProduct]:
    """Build the catalog and sales tally from the store, then rank."""
    catalog = await load_catalog(store)
    orders = await store.scan_all(ORDERS_TABLE)
    sold = tally_units_sold(orders)
    trending = rank_trending(catalog, sold, limit)

    logger.info(
        "trending_ranked",
        branch="sales" if sold else "popularity_fallback",
        orders_scanned=len(orders),
        returned=len(trending),
        source="trending",
    )
    return trending
