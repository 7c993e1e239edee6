"""Logging setup for the snapshot worker."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(threadName)s [%(name)s] %(message)s"
# Per-request lines from these libraries drown out the per-item progress log.
NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel", "alembic.runtime.migration")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Configure root logging for a long-running worker process.

    ``verbose`` lowers the root level to DEBUG. The HTTP and migration loggers stay
    at WARNING either way. ``force`` replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=force,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
