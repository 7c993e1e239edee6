from __future__ import annotations

from snapsync.domain.reaper import STALE_AFTER_SECONDS, reap_stale_listings
from tests.helpers.listings import (
    NOW,
    FakeListingRepository,
    FakeListingUnitOfWork,
    FixedClock,
    make_listing,
)


def test_reap_deletes_rows_at_or_past_the_bound() -> None:
    repository = FakeListingRepository()
    repository.add_all(
        [
            make_listing("exact", updated=NOW - STALE_AFTER_SECONDS),
            make_listing("older", updated=NOW - STALE_AFTER_SECONDS - 500),
            make_listing("fresh", updated=NOW - (STALE_AFTER_SECONDS - 1)),
        ]
    )
    uow = FakeListingUnitOfWork(repository)

    deleted = reap_stale_listings(lambda: uow, clock=FixedClock())

    assert deleted == 2
    assert [key.steamid for key in repository.rows] == ["fresh"]
    assert uow.committed is True


def test_stale_bound_is_thirty_five_minutes() -> None:
    assert STALE_AFTER_SECONDS == 2100
