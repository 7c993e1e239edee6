"""Pass scheduler driving snapshot synchronisation across the catalog."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .data_integration import SyncOutcome, sync_item
from .errors import ITEM_ERRORS, SnapsyncError, SourceInitFailed
from .ingest_pipeline import ListingPolicy
from .reaper import reap_stale_listings

if TYPE_CHECKING:
    from collections.abc import Callable

    from .catalog import CatalogStore
    from .ports import ListingUnitOfWork, SkuResolver, SnapshotSource

log = getLogger(__name__)


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING_PASS = "running_pass"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


@dataclass(slots=True)
class PassStatistics:
    """Counters for a single pass; reset whenever a new pass starts."""

    total: int = 0
    completed: int = 0
    custom: int = 0
    # Items left to the baseline price source; the key item always is.
    baseline: int = 1
    skipped: int = 0
    failed: int = 0
    written: int = 0
    reaped: int = 0

    @property
    def remaining(self) -> int:
        return self.total - self.completed


@dataclass(slots=True)
class PassScheduler:
    catalog: CatalogStore
    resolver: SkuResolver
    source: SnapshotSource
    unit_of_work_factory: Callable[[], ListingUnitOfWork]
    policy: ListingPolicy = field(default_factory=ListingPolicy)
    interval_seconds: float = 300.0
    always_query: bool = False
    clock: Callable[[], float] = time.time
    stop_event: threading.Event = field(default_factory=threading.Event)
    state: SchedulerState = SchedulerState.IDLE
    stats: PassStatistics = field(default_factory=PassStatistics)
    passes: int = 0
    _started: bool = False

    def start(self) -> None:
        """Initialise the name resolver; failure aborts before the first pass."""

        try:
            self.resolver.initialize()
        except SourceInitFailed:
            raise
        except SnapsyncError as exc:
            raise SourceInitFailed(f"SKU resolver failed to initialise: {exc}") from exc
        self._started = True

    def run_forever(self, *, max_passes: int | None = None) -> None:
        if not self._started:
            self.start()
        while not self.stop_event.is_set():
            self.run_pass()
            if max_passes is not None and self.passes >= max_passes:
                break
            self.state = SchedulerState.SLEEPING
            log.info(
                f"Running snapshot pass again in {self.interval_seconds / 60:g} minute(s)"
            )
            if self.stop_event.wait(self.interval_seconds):
                break
        self.state = SchedulerState.STOPPED

    def stop(self) -> None:
        self.stop_event.set()

    def run_pass(self) -> PassStatistics:
        """Process every name of the catalog snapshot taken at pass start, in order."""

        if not self._started:
            self.start()
        self.state = SchedulerState.RUNNING_PASS
        names = sorted(self.catalog.current_names())
        self.stats = PassStatistics(total=len(names))
        log.info(f"Snapshotting {len(names)} items")

        for name in names:
            if self.stop_event.is_set():
                log.info("Stop requested, abandoning the remainder of the pass")
                break
            self._process(name)
            self.stats.completed += 1
            log.info(
                f"Snapshot in progress: {self.stats.remaining} items left, "
                f"{self.stats.completed} completed"
            )

        self.passes += 1
        log.info(
            f"Snapshot pass complete: completed={self.stats.completed}, "
            f"custom={self.stats.custom}, baseline={self.stats.baseline}, "
            f"skipped={self.stats.skipped}, failed={self.stats.failed}, "
            f"written={self.stats.written}, reaped={self.stats.reaped}"
        )
        return self.stats

    def _process(self, name: str) -> None:
        try:
            self.stats.reaped += reap_stale_listings(self.unit_of_work_factory, clock=self.clock)
            sku = self.resolver.resolve(name)
            result = sync_item(
                name,
                sku,
                source=self.source,
                unit_of_work_factory=self.unit_of_work_factory,
                policy=self.policy,
                always_query=self.always_query,
                clock=self.clock,
            )
        except ITEM_ERRORS as exc:
            self.stats.failed += 1
            log.error(f"Skipping {name} [{exc.kind}]: {exc}")
            return

        if result.outcome is SyncOutcome.SKIPPED:
            self.stats.skipped += 1
        elif result.outcome is SyncOutcome.WRITTEN:
            self.stats.custom += 1
            self.stats.written += result.written
        else:
            self.stats.baseline += 1
