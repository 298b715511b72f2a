"""
Florify — Alert Acknowledgement Tracker

Read-state is tied to a price, not to an alert identity. For each
(vendor_id, canonical_name) the store keeps the price the vendor last
reviewed:

    is_read  <=>  record exists  AND  record.read_at_price == alert.your_price

Any change to the vendor's own price therefore un-reads the alert on the
next read, with no explicit "unacknowledge" call.

Two write paths store different prices on purpose:
    acknowledge_alert       -> min of the vendor's own listing prices for the name
    acknowledge_all_alerts  -> each alert's own your_price
For a vendor holding several listings under one name at different prices
these can disagree; whichever path wrote last decides the read-state.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Mapping, NamedTuple

import structlog

from florify.engine.alerts import AlertSnapshot, compute_vendor_alerts
from florify.engine.records import as_finite_decimal, parse_listings
from florify.errors import (
    InvalidInputError,
    NotFoundError,
    PartialAcknowledgementError,
    StoreUnavailableError,
)
from florify.store.base import (
    ALERT_READS_TABLE,
    LISTINGS_TABLE,
    VENDOR_INDEX,
    MarketplaceStore,
    RangeCondition,
)

logger = structlog.get_logger(__name__)


class VendorAlert(NamedTuple):
    """AlertSnapshot plus its read flag."""
    canonical_name: str
    your_price: Decimal
    market_average: Decimal
    lowest_market_price: Decimal
    difference: Decimal
    percent_above: Decimal
    listing_id: str
    is_read: bool


class AcknowledgementRecord(NamedTuple):
    vendor_id: str
    canonical_name: str
    read_at_price: Decimal
    read_at: datetime

    def to_item(self) -> dict:
        return self._asdict()


async def load_read_prices(store: MarketplaceStore, vendor_id: str) -> dict[str, Decimal]:
    """
    Load canonical_name -> acknowledged price for one vendor.

    Records with an empty name or a non-finite price are ignored.
    """
    records = await store.query_by_index(ALERT_READS_TABLE, None, vendor_id)
    read_prices: dict[str, Decimal] = {}
    for record in records:
        canonical_name = str(record.get("canonical_name") or "")
        read_at_price = as_finite_decimal(record.get("read_at_price"))
        if not canonical_name or read_at_price is None:
            continue
        read_prices[canonical_name] = read_at_price
    return read_prices


def is_read(alert: AlertSnapshot, read_prices: Mapping[str, Decimal]) -> bool:
    # Exact equality; no tolerance
    return read_prices.get(alert.canonical_name) == alert.your_price


def classify_alerts(
    alerts: Iterable[AlertSnapshot],
    read_prices: Mapping[str, Decimal],
) -> list[VendorAlert]:
    return [VendorAlert(*alert, is_read=is_read(alert, read_prices)) for alert in alerts]


async def list_vendor_alerts(store: MarketplaceStore, vendor_id: str) -> list[VendorAlert]:
    """Current alerts for the vendor, worst first, each flagged read/unread."""
    alerts = await compute_vendor_alerts(store, vendor_id)
    read_prices = await load_read_prices(store, vendor_id)
    return classify_alerts(alerts, read_prices)


async def get_unread_alert_count(store: MarketplaceStore, vendor_id: str) -> int:
    """Badge counter: number of current alerts not classified as read."""
    alerts = await compute_vendor_alerts(store, vendor_id)
    read_prices = await load_read_prices(store, vendor_id)
    return sum(1 for alert in alerts if not is_read(alert, read_prices))


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def acknowledge_alert(
    store: MarketplaceStore,
    vendor_id: str,
    canonical_name: str,
) -> AcknowledgementRecord:
    """
    Mark the vendor's alert for one canonical name as read.

    Stores the minimum of the vendor's own listing prices for that name.
    When the vendor has several listings under the name, this can differ
    from the price an individual alert carries.

    Raises:
        InvalidInputError: canonical_name is blank.
        NotFoundError: The vendor has no listing under canonical_name.
    """
    canonical_name = (canonical_name or "").strip()
    if not canonical_name:
        raise InvalidInputError("canonical_name is required")

    own_items = await store.query_by_index(
        LISTINGS_TABLE,
        VENDOR_INDEX,
        vendor_id,
        RangeCondition.equals(canonical_name),
    )
    own_prices = [listing.price for listing in parse_listings(own_items)]
    if not own_prices:
        raise NotFoundError(
            f"Vendor {vendor_id!r} has no listing for canonical name {canonical_name!r}"
        )

    record = AcknowledgementRecord(
        vendor_id=vendor_id,
        canonical_name=canonical_name,
        read_at_price=min(own_prices),
        read_at=_now(),
    )
    await store.put(ALERT_READS_TABLE, record.to_item())

    logger.info(
        "alert_acknowledged",
        vendor_id=vendor_id,
        canonical_name=canonical_name,
        read_at_price=str(record.read_at_price),
        source="acknowledgements",
    )
    return record


async def acknowledge_all_alerts(store: MarketplaceStore, vendor_id: str) -> int:
    """
    Mark every current alert as read at its own price.

    One write per alert, no transaction. If a write fails, the records
    already written stay and PartialAcknowledgementError reports how many.

    Returns:
        Number of alerts acknowledged (0 when nothing is alerting).
    """
    alerts = await compute_vendor_alerts(store, vendor_id)
    acknowledged = 0

    for alert in alerts:
        record = AcknowledgementRecord(
            vendor_id=vendor_id,
            canonical_name=alert.canonical_name,
            read_at_price=alert.your_price,
            read_at=_now(),
        )
        try:
            await store.put(ALERT_READS_TABLE, record.to_item())
        except StoreUnavailableError as e:
            logger.error(
                "acknowledge_all_partial_failure",
                vendor_id=vendor_id,
                acknowledged=acknowledged,
                remaining=len(alerts) - acknowledged,
                canonical_name=alert.canonical_name,
                error=str(e),
                source="acknowledgements",
            )
            raise PartialAcknowledgementError(
                acknowledged=acknowledged,
                canonical_name=alert.canonical_name,
                message=f"Acknowledged {acknowledged} of {len(alerts)} alerts before failure: {e}",
            ) from e
        acknowledged += 1

    logger.info(
        "alerts_acknowledged",
        vendor_id=vendor_id,
        count=acknowledged,
        source="acknowledgements",
    )
    return acknowledged
