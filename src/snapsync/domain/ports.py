"""Ports implemented by adapters and consumed by the domain services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from .model import IntentCounts, Listing, RawListing


@runtime_checkable
class SnapshotSource(Protocol):
    """Fetches the current listings for one item name.

    Returns ``None`` when the source does not know the name at all, which is not the
    same as an item that simply has no listings.
    """

    def fetch(self, name: str) -> Sequence[RawListing] | None: ...


@runtime_checkable
class SkuResolver(Protocol):
    """Maps item display names to SKUs."""

    def initialize(self) -> None: ...

    def resolve(self, name: str) -> str: ...


@runtime_checkable
class ListingRepository(Protocol):
    """Persistence contract for reconciled listings."""

    def upsert(self, listings: Sequence[Listing]) -> None: ...

    def count_by_intent(self, name: str) -> IntentCounts: ...

    def delete_older_than(self, cutoff: int) -> int: ...


@dataclass(slots=True)
class ListingRepositories:
    listings: ListingRepository


@runtime_checkable
class ListingUnitOfWork(Protocol):
    """Transaction boundary around the listing repositories.

    Changes made inside the ``with`` block persist only after ``commit()``.
    """

    @property
    def repositories(self) -> ListingRepositories: ...

    def __enter__(self) -> ListingUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
