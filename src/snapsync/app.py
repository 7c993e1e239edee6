"""Application orchestration entry points."""

from __future__ import annotations

import threading
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from snapsync.adapters.backpacktf import BackpackTfSnapshotSource
from snapsync.adapters.catalog_file import CatalogWatcher, file_catalog
from snapsync.adapters.item_schema import ItemSchemaSkuResolver
from snapsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from snapsync.config import get_backpacktf_config, get_database_config, get_item_schema_config
from snapsync.domain.ingest_pipeline import ListingPolicy
from snapsync.domain.ports import ListingUnitOfWork
from snapsync.domain.reaper import reap_stale_listings
from snapsync.domain.scheduler import PassScheduler, PassStatistics

if TYPE_CHECKING:
    from snapsync.config import WorkerConfig
    from snapsync.domain.catalog import CatalogStore
    from snapsync.domain.ports import SkuResolver, SnapshotSource

UnitOfWorkFactory = Callable[[], ListingUnitOfWork]


log = getLogger(__name__)


def start_store(config: WorkerConfig) -> None:
    database = get_database_config(settings=config.database)
    startup(database_uri=database.uri, schema=database.schema)


def build_scheduler(
    config: WorkerConfig,
    *,
    catalog: CatalogStore,
    source: SnapshotSource | None = None,
    resolver: SkuResolver | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    stop_event: threading.Event | None = None,
) -> PassScheduler:
    """Wire the pass scheduler from configuration, defaulting to the HTTP and SQL adapters."""

    return PassScheduler(
        catalog=catalog,
        resolver=resolver or ItemSchemaSkuResolver(config=get_item_schema_config()),
        source=source or BackpackTfSnapshotSource(config=get_backpacktf_config(config.api_key)),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        policy=ListingPolicy.from_config(
            config.excluded_listing_descriptions, config.blocked_attributes
        ),
        interval_seconds=config.pass_interval_seconds,
        always_query=config.always_query_snapshot_api,
        stop_event=threading.Event() if stop_event is None else stop_event,
    )


def run_worker(
    config: WorkerConfig,
    *,
    max_passes: int | None = None,
    stop_event: threading.Event | None = None,
) -> PassStatistics:
    """Run snapshot passes until ``stop_event`` is set or ``max_passes`` passes completed.

    Setting the event lets the current item finish, then ends the loop; the catalog
    watcher and the store are shut down either way.
    """

    start_store(config)
    catalog = file_catalog(config.item_list_path)
    watcher = CatalogWatcher(catalog, config.item_list_path)
    scheduler = build_scheduler(config, catalog=catalog, stop_event=stop_event)
    log.info(
        f"Starting snapshot worker: items={len(catalog.current_names())}, "
        f"interval={config.price_timeout_min}min, "
        f"always_query={config.always_query_snapshot_api}"
    )
    try:
        scheduler.start()
        watcher.start()
        scheduler.run_forever(max_passes=max_passes)
    finally:
        watcher.stop()
        shutdown()
    return scheduler.stats


def reap_once(config: WorkerConfig) -> int:
    """Delete stale listings once, outside the pass loop."""

    start_store(config)
    try:
        deleted = reap_stale_listings(SqlAlchemyUnitOfWork)
    finally:
        shutdown()
    log.info(f"Reaped {deleted} stale listings")
    return deleted
