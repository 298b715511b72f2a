"""
SQLAlchemy 2.0 async DeclarativeBase for Florify.

All models inherit from this Base.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all Florify database models."""

    def to_item(self) -> dict[str, Any]:
        """Return the row as a plain store item keyed by attribute name."""
        return {
            attr.key: getattr(self, attr.key)
            for attr in self.__mapper__.column_attrs
        }
