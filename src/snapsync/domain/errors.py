"""Error taxonomy for the snapshot worker."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    CATALOG_LOAD_FAILED = "CatalogLoadFailed"
    NO_MATCHING_CATALOG_ENTRY = "NoMatchingCatalogEntry"
    SOURCE_UNAVAILABLE = "SourceUnavailable"
    STORE_WRITE_FAILED = "StoreWriteFailed"
    SOURCE_INIT_FAILED = "SourceInitFailed"


class SnapsyncError(RuntimeError):
    """Base class for worker errors; ``kind`` identifies the failure category."""

    kind: ErrorKind


class CatalogLoadFailed(SnapsyncError):
    """The catalog document could not be read or parsed."""

    kind = ErrorKind.CATALOG_LOAD_FAILED


class NoMatchingCatalogEntry(SnapsyncError):
    """The item name does not correspond to anything the source can fetch."""

    kind = ErrorKind.NO_MATCHING_CATALOG_ENTRY

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                f"No listings found for {name!r} in the snapshot; the name likely "
                "does not match the one on the item's listings page"
            )
        )
        self.name = name


class SourceUnavailable(SnapsyncError):
    """The snapshot source could not be reached or answered with an error."""

    kind = ErrorKind.SOURCE_UNAVAILABLE


class StoreWriteFailed(SnapsyncError):
    """The listing store rejected or failed a read or write."""

    kind = ErrorKind.STORE_WRITE_FAILED


class SourceInitFailed(SnapsyncError):
    """The name-resolution dependency failed to initialise; fatal."""

    kind = ErrorKind.SOURCE_INIT_FAILED


# Failures confined to a single catalog item; the pass moves on to the next name.
ITEM_ERRORS: tuple[type[SnapsyncError], ...] = (
    NoMatchingCatalogEntry,
    SourceUnavailable,
    StoreWriteFailed,
)
