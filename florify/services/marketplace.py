"""
Florify — Marketplace Facade

Single entry point the surrounding application (HTTP routes, CLI, jobs)
calls into. Holds the injected store and delegates to the engine and
service modules. Keeps no mutable state between calls, so one instance can
serve concurrent requests.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

import structlog

from florify.engine import acknowledgements, alerts, catalog, trending
from florify.engine.acknowledgements import AcknowledgementRecord, VendorAlert
from florify.engine.catalog import CatalogSummary, ProductDetail
from florify.engine.records import Listing, Order
from florify.engine.trending import TrendingProduct
from florify.services import listings, orders
from florify.store.base import MarketplaceStore

logger = structlog.get_logger(__name__)


class Marketplace:
    """Buyer catalog, vendor listings and vendor price alerts over one store."""

    def __init__(self, store: MarketplaceStore):
        self.store = store

    # -----------------------------------------------------------------------
    # Buyer catalog
    # -----------------------------------------------------------------------

    async def list_catalog(self) -> list[CatalogSummary]:
        return await catalog.list_catalog(self.store)

    async def get_product_detail(self, canonical_name: str) -> ProductDetail:
        return await catalog.get_product_detail(self.store, canonical_name)

    async def list_trending(self, limit: int | None = None) -> list[TrendingProduct]:
        return await trending.list_trending(self.store, limit)

    # -----------------------------------------------------------------------
    # Vendor price alerts
    # -----------------------------------------------------------------------

    async def list_vendor_alerts(self, vendor_id: str) -> list[VendorAlert]:
        return await acknowledgements.list_vendor_alerts(self.store, vendor_id)

    async def get_unread_alert_count(self, vendor_id: str) -> int:
        return await acknowledgements.get_unread_alert_count(self.store, vendor_id)

    async def acknowledge_alert(self, vendor_id: str, canonical_name: str) -> AcknowledgementRecord:
        return await acknowledgements.acknowledge_alert(self.store, vendor_id, canonical_name)

    async def acknowledge_all_alerts(self, vendor_id: str) -> int:
        return await acknowledgements.acknowledge_all_alerts(self.store, vendor_id)

    async def compute_vendor_alerts(self, vendor_id: str) -> list[alerts.AlertSnapshot]:
        """Raw alert snapshots without read-state."""
        return await alerts.compute_vendor_alerts(self.store, vendor_id)

    # -----------------------------------------------------------------------
    # Vendor listings
    # -----------------------------------------------------------------------

    async def create_listing(
        self,
        vendor_id: str,
        vendor_name: str,
        canonical_name: str,
        price: Decimal | int | str | None,
        **descriptive: Any,
    ) -> Listing:
        return await listings.create_listing(
            self.store, vendor_id, vendor_name, canonical_name, price, **descriptive
        )

    async def list_vendor_listings(self, vendor_id: str) -> list[Listing]:
        return await listings.list_vendor_listings(self.store, vendor_id)

    async def update_listing(self, vendor_id: str, listing_id: str, /, **fields: Any) -> Listing:
        return await listings.update_listing(self.store, vendor_id, listing_id, **fields)

    async def delete_listing(self, vendor_id: str, listing_id: str) -> None:
        await listings.delete_listing(self.store, vendor_id, listing_id)

    # -----------------------------------------------------------------------
    # Orders
    # -----------------------------------------------------------------------

    async def place_order(
        self,
        buyer_id: str,
        buyer_name: str,
        items: Sequence[Mapping[str, Any]],
    ) -> Order:
        return await orders.place_order(self.store, buyer_id, buyer_name, items)

    async def list_orders(self, buyer_id: str) -> list[Order]:
        return await orders.list_orders(self.store, buyer_id)
