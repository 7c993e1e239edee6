"""Shared state passed between ingest pipeline phases."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .policy import ListingPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from snapsync.domain.model import Listing, RawListing


class DropReason(StrEnum):
    NO_USER_AGENT = "no_user_agent"
    EXCLUDED_DESCRIPTION = "excluded_description"
    BLOCKED_ATTRIBUTE = "blocked_attribute"
    INVALID_CURRENCIES = "invalid_currencies"
    UNKNOWN_INTENT = "unknown_intent"
    DUPLICATE = "duplicate"


@dataclass(slots=True)
class ListingBatch:
    """Listings fetched for one catalog item in one snapshot call.

    ``raw`` shrinks as filters drop records; ``listings`` holds the canonical
    entities once normalization ran.
    """

    name: str
    sku: str
    raw: list[RawListing] = field(default_factory=list)
    listings: list[Listing] = field(default_factory=list)


@dataclass(slots=True)
class PipelineContext:
    policy: ListingPolicy = field(default_factory=ListingPolicy)
    clock: Callable[[], float] = time.time
    dropped: Counter[DropReason] = field(default_factory=Counter)
    normalized: int = 0
    updated: int | None = None

    def drop(self, reason: DropReason) -> None:
        self.dropped[reason] += 1

    @property
    def dropped_total(self) -> int:
        return sum(self.dropped.values())
