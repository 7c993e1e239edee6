"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from snapsync.adapters.sqlalchemy.mappings import LISTING_KEY_COLUMNS, listings_table
from snapsync.domain.errors import StoreWriteFailed
from snapsync.domain.model import Intent, IntentCounts

# Six bound parameters per row; SQLite caps a statement at 32766.
UPSERT_CHUNK_SIZE = 1000

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session

    from snapsync.domain.model import Listing


def _insert_for(dialect_name: str) -> Any:
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise StoreWriteFailed(f"Listing upserts are not supported on {dialect_name!r}")


class SqlAlchemyListingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, listings: Sequence[Listing]) -> None:
        """Bulk insert; an existing row only changes when the incoming ``updated`` is newer."""

        if not listings:
            return
        rows = [
            {
                "name": listing.name,
                "sku": listing.sku,
                "currencies": listing.currencies,
                "intent": listing.intent,
                "updated": listing.updated,
                "steamid": listing.steamid,
            }
            for listing in listings
        ]
        insert = _insert_for(self.session.get_bind().dialect.name)
        try:
            for start in range(0, len(rows), UPSERT_CHUNK_SIZE):
                stmt = insert(listings_table).values(rows[start : start + UPSERT_CHUNK_SIZE])
                stmt = stmt.on_conflict_do_update(
                    index_elements=[listings_table.c[column] for column in LISTING_KEY_COLUMNS],
                    set_={
                        "currencies": stmt.excluded.currencies,
                        "updated": stmt.excluded.updated,
                    },
                    where=stmt.excluded.updated > listings_table.c.updated,
                )
                self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteFailed(f"Upserting {len(rows)} listings failed: {exc}") from exc

    def count_by_intent(self, name: str) -> IntentCounts:
        stmt = (
            select(listings_table.c.intent, func.count())
            .where(listings_table.c.name == name)
            .group_by(listings_table.c.intent)
        )
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreWriteFailed(f"Counting listings for {name!r} failed: {exc}") from exc

        counts = IntentCounts()
        for intent, count in rows:
            if intent is Intent.BUY:
                counts.buy = int(count)
            elif intent is Intent.SELL:
                counts.sell = int(count)
        return counts

    def delete_older_than(self, cutoff: int) -> int:
        stmt = delete(listings_table).where(listings_table.c.updated <= cutoff)
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreWriteFailed(f"Deleting stale listings failed: {exc}") from exc
        return int(cast(Any, result).rowcount or 0)


if TYPE_CHECKING:
    from snapsync.domain.ports import ListingRepository

    _session_stub = cast("Session", object())
    _repo_check: ListingRepository = SqlAlchemyListingRepository(_session_stub)
