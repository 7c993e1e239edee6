from __future__ import annotations

import pytest

from snapsync.domain.data_integration import SyncOutcome, sync_item
from snapsync.domain.errors import NoMatchingCatalogEntry, SourceUnavailable
from snapsync.domain.ingest_pipeline import SNAPSHOT_BACKOFF_SECONDS, DropReason, ListingPolicy
from snapsync.domain.model import Intent
from tests.helpers.listings import (
    NOW,
    FakeListingRepository,
    FakeListingUnitOfWork,
    FakeSnapshotSource,
    FixedClock,
    make_listing,
    make_raw_listing,
)


def _covered_repository(name: str) -> FakeListingRepository:
    repository = FakeListingRepository()
    repository.add_all(make_listing(f"buyer-{i}", name=name) for i in range(10))
    repository.add_all([make_listing("seller", name=name, intent=Intent.SELL)])
    return repository


def test_sufficient_coverage_skips_the_fetch() -> None:
    repository = _covered_repository("X")
    source = FakeSnapshotSource({"X": [make_raw_listing()]})

    result = sync_item(
        "X",
        "1",
        source=source,
        unit_of_work_factory=lambda: FakeListingUnitOfWork(repository),
    )

    assert result.outcome is SyncOutcome.SKIPPED
    assert source.calls == []
    assert repository.upserts == []


def test_always_query_bypasses_coverage_check() -> None:
    repository = _covered_repository("X")
    source = FakeSnapshotSource({"X": [make_raw_listing("new-bot")]})

    result = sync_item(
        "X",
        "1",
        source=source,
        unit_of_work_factory=lambda: FakeListingUnitOfWork(repository),
        always_query=True,
        clock=FixedClock(),
    )

    assert result.outcome is SyncOutcome.WRITTEN
    assert source.calls == ["X"]
    assert result.written == 1


def test_insufficient_coverage_fetches_and_upserts() -> None:
    repository = FakeListingRepository()
    source = FakeSnapshotSource(
        {
            "X": [
                make_raw_listing("A", intent="buy"),
                make_raw_listing("A", intent="buy"),
                make_raw_listing("B", has_user_agent=False),
            ]
        }
    )

    result = sync_item(
        "X",
        "1",
        source=source,
        unit_of_work_factory=lambda: FakeListingUnitOfWork(repository),
        policy=ListingPolicy(),
        clock=FixedClock(),
    )

    assert result.outcome is SyncOutcome.WRITTEN
    assert result.fetched == 3
    assert result.written == 1
    assert result.dropped == {DropReason.DUPLICATE: 1, DropReason.NO_USER_AGENT: 1}
    (stored,) = repository.rows.values()
    assert stored.steamid == "A"
    assert stored.updated == NOW - SNAPSHOT_BACKOFF_SECONDS


def test_absent_snapshot_raises_no_matching_catalog_entry() -> None:
    repository = FakeListingRepository()

    with pytest.raises(NoMatchingCatalogEntry) as exc:
        sync_item(
            "Unknown Hat",
            "1",
            source=FakeSnapshotSource(),
            unit_of_work_factory=lambda: FakeListingUnitOfWork(repository),
        )

    assert exc.value.name == "Unknown Hat"
    assert exc.value.kind == "NoMatchingCatalogEntry"


def test_empty_snapshot_is_not_an_error_and_writes_nothing() -> None:
    repository = FakeListingRepository()

    result = sync_item(
        "X",
        "1",
        source=FakeSnapshotSource({"X": []}),
        unit_of_work_factory=lambda: FakeListingUnitOfWork(repository),
    )

    assert result.outcome is SyncOutcome.EMPTY
    assert repository.upserts == []


def test_source_errors_propagate() -> None:
    source = FakeSnapshotSource(errors={"X": SourceUnavailable("down")})

    with pytest.raises(SourceUnavailable):
        sync_item(
            "X",
            "1",
            source=source,
            unit_of_work_factory=lambda: FakeListingUnitOfWork(FakeListingRepository()),
        )
