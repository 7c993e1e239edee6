"""Public interface for the backpack.tf snapshot adapter."""

from __future__ import annotations

from .client import BackpackTfSnapshotSource
from .schema import ListingPayload, SnapshotResponse
from .translator import parse_raw_listing, parse_raw_listings

__all__ = [
    "BackpackTfSnapshotSource",
    "ListingPayload",
    "SnapshotResponse",
    "parse_raw_listing",
    "parse_raw_listings",
]
