"""SQLAlchemy adapter package for snapsync."""

from __future__ import annotations

from .mappings import listings_table, metadata
from .repositories import SqlAlchemyListingRepository

__all__ = [
    "SqlAlchemyListingRepository",
    "listings_table",
    "metadata",
]
