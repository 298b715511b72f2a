from florify.engine.acknowledgements import (
    acknowledge_alert,
    acknowledge_all_alerts,
    get_unread_alert_count,
    list_vendor_alerts,
)
from florify.engine.alerts import compute_vendor_alerts, evaluate_listing
from florify.engine.catalog import build_catalog, get_product_detail, list_catalog
from florify.engine.trending import list_trending, rank_trending, tally_units_sold

__all__ = [
    "acknowledge_alert",
    "acknowledge_all_alerts",
    "build_catalog",
    "compute_vendor_alerts",
    "evaluate_listing",
    "get_product_detail",
    "get_unread_alert_count",
    "list_catalog",
    "list_trending",
    "list_vendor_alerts",
    "rank_trending",
    "tally_units_sold",
]
