from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from snapsync.app import reap_once, run_worker
from snapsync.config import ConfigurationError, configure_logging, get_worker_config
from snapsync.domain.errors import SnapsyncError, SourceInitFailed

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snapshot listings into the listing store")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the JSON configuration file (default: $SNAPSYNC_CONFIG or config.json)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    run = subparsers.add_parser("run", help="Run snapshot passes until interrupted (default)")
    run.add_argument(
        "--passes",
        type=int,
        help="Stop after this many passes instead of running forever",
    )

    subparsers.add_parser("once", help="Run a single snapshot pass and exit")
    subparsers.add_parser("reap", help="Delete stale listings once and exit")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""

    load_dotenv()
    stop_event = threading.Event()
    handler = _stop_handler(stop_event)
    signal(SIGINT, handler)
    signal(SIGTERM, handler)

    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(verbose=args.verbose)

    try:
        config = get_worker_config(config_path=args.config)
    except ConfigurationError as exc:
        log.error(f"Configuration error: {exc}")
        sys.exit(2)

    command = args.command or "run"
    try:
        if command == "reap":
            reap_once(config)
        elif command == "once":
            run_worker(config, max_passes=1, stop_event=stop_event)
        else:
            run_worker(
                config, max_passes=getattr(args, "passes", None), stop_event=stop_event
            )
    except SourceInitFailed as exc:
        log.critical(f"Startup failed: {exc}")
        sys.exit(1)
    except SnapsyncError as exc:
        log.error(f"{exc.kind}: {exc}")
        sys.exit(1)


def _stop_handler(stop_event: threading.Event) -> Callable[[int, FrameType | None], None]:
    """First signal finishes the current item and stops; a second one exits at once."""

    def handle(signal_received: int, _frame: FrameType | None) -> None:
        if stop_event.is_set():
            log.warning(f"Received signal {signal_received} again, exiting immediately")
            sys.exit(1)
        log.info(f"Received signal {signal_received}, stopping after the current item")
        stop_event.set()

    return handle


if __name__ == "__main__":
    main()
