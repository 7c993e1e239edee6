"""Catalog of item names tracked by the worker."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import CatalogLoadFailed

if TYPE_CHECKING:
    from collections.abc import Iterable

CatalogLoader = Callable[[], frozenset[str]]

log = getLogger(__name__)


class CatalogStore:
    """Holds the current set of item names.

    ``reload`` swaps the reference to a freshly built frozenset, so readers holding
    the previous snapshot never observe a partially updated set.
    """

    def __init__(self, loader: CatalogLoader, initial: Iterable[str] = ()) -> None:
        self._loader = loader
        self._names: frozenset[str] = frozenset(initial)

    def current_names(self) -> frozenset[str]:
        return self._names

    def reload(self) -> bool:
        """Re-read the catalog source; keep the previous names when loading fails."""

        try:
            names = self._loader()
        except CatalogLoadFailed as exc:
            log.error(f"Error reading catalog, keeping {len(self._names)} previous names: {exc}")
            return False
        self._names = names
        log.info(f"Updated catalog: {len(names)} item names")
        return True
