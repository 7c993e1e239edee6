"""Eviction of listings that have not been refreshed recently."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable

    from .ports import ListingUnitOfWork

# Well-behaved bots bump their listings every 30 minutes; 35 leaves one grace cycle
# before a listing that missed its bump is presumed gone.
STALE_AFTER_SECONDS: Final[int] = 35 * 60

log = getLogger(__name__)


def stale_cutoff(now: float) -> int:
    """Listings updated at or before the cutoff are at least ``STALE_AFTER_SECONDS`` old."""

    return int(now) - STALE_AFTER_SECONDS


def reap_stale_listings(
    unit_of_work_factory: Callable[[], ListingUnitOfWork],
    *,
    clock: Callable[[], float] = time.time,
) -> int:
    """Delete every stored listing whose age reached the staleness bound."""

    cutoff = stale_cutoff(clock())
    with unit_of_work_factory() as uow:
        deleted = uow.repositories.listings.delete_older_than(cutoff)
        uow.commit()
    if deleted:
        log.debug(f"Reaped {deleted} stale listings (updated <= {cutoff})")
    return deleted
