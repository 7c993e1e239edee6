"""JSON item list loader and a change watcher that reloads the catalog."""

from __future__ import annotations

import json
import threading
from logging import getLogger
from typing import TYPE_CHECKING

from snapsync.domain.catalog import CatalogStore
from snapsync.domain.errors import CatalogLoadFailed

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

DEFAULT_POLL_SECONDS = 2.0


def load_catalog_names(path: Path) -> frozenset[str]:
    """Read ``{"items": [{"name": ...}, ...]}`` and return the set of names."""

    try:
        with path.open(encoding="utf-8") as handle:
            document = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogLoadFailed(f"Cannot read item list {path}: {exc}") from exc

    items = document.get("items") if isinstance(document, dict) else None
    if not isinstance(items, list):
        raise CatalogLoadFailed(f"Item list {path} has no 'items' list")

    names: set[str] = set()
    for item in items:
        name = item.get("name") if isinstance(item, dict) else None
        if isinstance(name, str) and name.strip():
            names.add(name)
    return frozenset(names)


def file_catalog(path: Path) -> CatalogStore:
    """Create a catalog backed by ``path`` and load it once."""

    catalog = CatalogStore(lambda: load_catalog_names(path))
    catalog.reload()
    return catalog


class CatalogWatcher:
    """Polls the item list's modification time and reloads the catalog on change."""

    def __init__(
        self,
        catalog: CatalogStore,
        path: Path,
        *,
        poll_seconds: float = DEFAULT_POLL_SECONDS,
    ) -> None:
        self.catalog = catalog
        self.path = path
        self.poll_seconds = poll_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_mtime = self._mtime()

    def _mtime(self) -> float | None:
        try:
            return self.path.stat().st_mtime
        except OSError:
            return None

    def check(self) -> bool:
        """Reload when the file changed since the last check; return whether it did."""

        mtime = self._mtime()
        if mtime is None or mtime == self._last_mtime:
            return False
        self._last_mtime = mtime
        log.info(f"Item list {self.path} changed, reloading catalog")
        self.catalog.reload()
        return True

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="catalog-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.poll_seconds * 2)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.poll_seconds):
            self.check()
