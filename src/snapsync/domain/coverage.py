"""Decides whether the store already covers an item well enough to skip a fetch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .model import IntentCounts
    from .ports import ListingRepository

MIN_SELL_LISTINGS: Final[int] = 1
MIN_BUY_LISTINGS: Final[int] = 10


def is_sufficient(counts: IntentCounts) -> bool:
    return counts.sell >= MIN_SELL_LISTINGS and counts.buy >= MIN_BUY_LISTINGS


def has_sufficient_coverage(repository: ListingRepository, name: str) -> bool:
    """Return True when stored listings for ``name`` already make a fetch unnecessary."""

    return is_sufficient(repository.count_by_intent(name))
