from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from snapsync.adapters.sqlalchemy import SqlAlchemyListingRepository, listings_table
from snapsync.adapters.sqlalchemy import repositories as repositories_module
from snapsync.domain.errors import StoreWriteFailed
from snapsync.domain.model import Currencies, Intent
from snapsync.domain.reaper import stale_cutoff
from tests.helpers.listings import NOW, make_listing

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def _stored(session: Session) -> list[tuple[str, Currencies, int]]:
    rows = session.execute(
        select(
            listings_table.c.steamid, listings_table.c.currencies, listings_table.c.updated
        ).order_by(listings_table.c.steamid)
    ).all()
    return [(steamid, currencies, updated) for steamid, currencies, updated in rows]


def test_upsert_inserts_and_round_trips_currencies(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)

    repository.upsert([make_listing("A", keys=1, metal=10.5)])

    ((steamid, currencies, updated),) = _stored(store_session)
    assert steamid == "A"
    assert currencies == Currencies(keys=1, metal=10.5)
    assert currencies.to_json() == '{"keys":1,"metal":10.5}'
    assert updated == NOW


def test_repeated_upsert_of_same_batch_is_idempotent(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)
    batch = [make_listing("A"), make_listing("B", intent=Intent.SELL)]

    repository.upsert(batch)
    repository.upsert(batch)

    assert [row[0] for row in _stored(store_session)] == ["A", "B"]


def test_newer_update_replaces_currencies(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)

    repository.upsert([make_listing("A", metal=1.0, updated=900)])
    repository.upsert([make_listing("A", metal=2.0, updated=1000)])

    assert _stored(store_session) == [("A", Currencies(metal=2.0), 1000)]


def test_older_update_never_overwrites_newer_row(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)

    repository.upsert([make_listing("A", metal=2.0, updated=1000)])
    repository.upsert([make_listing("A", metal=1.0, updated=900)])
    repository.upsert([make_listing("A", metal=3.0, updated=1000)])

    assert _stored(store_session) == [("A", Currencies(metal=2.0), 1000)]


def test_same_bot_may_hold_buy_and_sell_rows(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)

    repository.upsert([make_listing("A"), make_listing("A", intent=Intent.SELL)])

    counts = repository.count_by_intent("Team Captain")
    assert (counts.buy, counts.sell) == (1, 1)


def test_count_by_intent_is_scoped_to_name(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)
    repository.upsert(
        [
            make_listing("A"),
            make_listing("B"),
            make_listing("C", intent=Intent.SELL),
            make_listing("D", name="Other Hat", sku="1;6"),
        ]
    )

    counts = repository.count_by_intent("Team Captain")

    assert (counts.buy, counts.sell) == (2, 1)
    empty = repository.count_by_intent("Missing")
    assert (empty.buy, empty.sell) == (0, 0)


def test_delete_older_than_uses_inclusive_cutoff(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)
    cutoff = stale_cutoff(NOW)
    repository.upsert(
        [
            make_listing("exact", updated=NOW - 2100),
            make_listing("fresh", updated=NOW - 2099),
            make_listing("older", updated=NOW - 5000),
        ]
    )

    deleted = repository.delete_older_than(cutoff)

    assert deleted == 2
    assert [row[0] for row in _stored(store_session)] == ["fresh"]


def test_large_batches_are_written_in_chunks(
    store_session: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(repositories_module, "UPSERT_CHUNK_SIZE", 2)
    repository = SqlAlchemyListingRepository(store_session)
    repository.upsert([make_listing("E", metal=1.0, updated=900)])
    statements: list[str] = []
    execute = store_session.execute

    def counting_execute(statement: object, *args: object, **kwargs: object) -> object:
        statements.append(str(statement))
        return execute(statement, *args, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(store_session, "execute", counting_execute)

    repository.upsert(
        [make_listing(steamid, updated=1000) for steamid in ("A", "B", "C", "D")]
        + [make_listing("E", metal=2.0, updated=1000)]
    )

    assert len(statements) == 3
    stored = _stored(store_session)
    assert [row[0] for row in stored] == ["A", "B", "C", "D", "E"]
    assert stored[-1] == ("E", Currencies(metal=2.0), 1000)


def test_upsert_of_empty_batch_is_a_no_op(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)

    repository.upsert([])

    assert _stored(store_session) == []


def test_database_errors_become_store_write_failed(store_session: Session) -> None:
    repository = SqlAlchemyListingRepository(store_session)
    listings_table.drop(store_session.connection())

    with pytest.raises(StoreWriteFailed):
        repository.upsert([make_listing("A")])
