"""
Models package — export all SQLAlchemy models.
"""

from florify.models.alert_read import AlertRead
from florify.models.base import Base
from florify.models.listing import Listing
from florify.models.order import Order

__all__ = ["AlertRead", "Base", "Listing", "Order"]
