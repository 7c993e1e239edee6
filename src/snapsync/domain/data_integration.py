"""Per-item snapshot synchronisation: gate, fetch, filter and upsert."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .coverage import has_sufficient_coverage
from .errors import NoMatchingCatalogEntry
from .ingest_pipeline import ListingPolicy, run_ingest_pipeline

if TYPE_CHECKING:
    from collections.abc import Callable

    from .ingest_pipeline import DropReason
    from .ports import ListingUnitOfWork, SnapshotSource

log = getLogger(__name__)


class SyncOutcome(StrEnum):
    SKIPPED = "skipped"
    WRITTEN = "written"
    EMPTY = "empty"


@dataclass(slots=True)
class SyncItemResult:
    """Outcome of synchronising one catalog item."""

    name: str
    sku: str
    outcome: SyncOutcome
    fetched: int = 0
    written: int = 0
    dropped: dict[DropReason, int] = field(default_factory=dict)


def sync_item(
    name: str,
    sku: str,
    *,
    source: SnapshotSource,
    unit_of_work_factory: Callable[[], ListingUnitOfWork],
    policy: ListingPolicy | None = None,
    always_query: bool = False,
    clock: Callable[[], float] = time.time,
) -> SyncItemResult:
    """Refresh the stored listings of ``name`` from the snapshot source.

    Raises ``NoMatchingCatalogEntry`` when the source does not know the name; store
    and source failures propagate as their respective domain errors.
    """

    if not always_query:
        with unit_of_work_factory() as uow:
            covered = has_sufficient_coverage(uow.repositories.listings, name)
        if covered:
            log.debug(f"Skipping snapshot for {name}: store coverage is sufficient")
            return SyncItemResult(name=name, sku=sku, outcome=SyncOutcome.SKIPPED)

    records = source.fetch(name)
    if records is None:
        raise NoMatchingCatalogEntry(name)

    listings, context = run_ingest_pipeline(
        name=name,
        sku=sku,
        records=records,
        policy=policy or ListingPolicy(),
        clock=clock,
    )
    result = SyncItemResult(
        name=name,
        sku=sku,
        outcome=SyncOutcome.EMPTY,
        fetched=len(records),
        dropped=dict(context.dropped),
    )
    if not listings:
        return result

    with unit_of_work_factory() as uow:
        uow.repositories.listings.upsert(listings)
        uow.commit()

    result.outcome = SyncOutcome.WRITTEN
    result.written = len(listings)
    log.debug(
        f"Upserted {result.written}/{result.fetched} listings for {name} "
        f"(dropped={context.dropped_total})"
    )
    return result
