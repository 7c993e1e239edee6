from __future__ import annotations

import json
import threading
from pathlib import Path  # noqa: TC003
from signal import SIGINT, SIGTERM
from typing import TYPE_CHECKING

import pytest

from snapsync.domain.errors import SourceInitFailed, SourceUnavailable
from snapsync.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(cli_module, "signal", lambda *_args: None)
    monkeypatch.setattr(cli_module, "load_dotenv", lambda: False)
    monkeypatch.delenv("SNAPSHOT_API_KEY", raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"apiKey": "secret", "priceTimeoutMin": 1}), encoding="utf-8")
    return path


def test_run_is_the_default_command(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    captured: dict[str, object] = {}

    def fake_run_worker(
        config: object, *, max_passes: int | None = None, stop_event: object = None
    ) -> None:
        captured["config"] = config
        captured["max_passes"] = max_passes
        captured["stop_event"] = stop_event

    monkeypatch.setattr(cli_module, "run_worker", fake_run_worker)

    cli_module.main(["--config", str(config_path)])

    assert captured["max_passes"] is None
    assert isinstance(captured["stop_event"], threading.Event)
    assert getattr(captured["config"], "api_key") == "secret"  # noqa: B009


def test_run_with_pass_limit(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(
        cli_module,
        "run_worker",
        lambda _config, *, max_passes=None, stop_event=None: captured.update(
            max_passes=max_passes
        ),
    )

    cli_module.main(["--config", str(config_path), "run", "--passes", "3"])

    assert captured["max_passes"] == 3


def test_once_runs_a_single_pass(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(
        cli_module,
        "run_worker",
        lambda _config, *, max_passes=None, stop_event=None: captured.update(
            max_passes=max_passes
        ),
    )

    cli_module.main(["--config", str(config_path), "once"])

    assert captured["max_passes"] == 1


def test_reap_command(monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
    calls: list[object] = []
    monkeypatch.setattr(cli_module, "reap_once", calls.append)

    cli_module.main(["--config", str(config_path), "reap"])

    assert len(calls) == 1


def test_configuration_error_exits_with_code_2(config_path: Path) -> None:
    config_path.write_text("{broken", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["--config", str(config_path)])

    assert exc.value.code == 2


@pytest.mark.parametrize("error", [SourceInitFailed("schema down"), SourceUnavailable("down")])
def test_worker_errors_exit_with_code_1(
    monkeypatch: pytest.MonkeyPatch, config_path: Path, error: Exception
) -> None:
    def fail(_config: object, **_options: object) -> None:
        raise error

    monkeypatch.setattr(cli_module, "run_worker", fail)

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["--config", str(config_path)])

    assert exc.value.code == 1


def test_signal_stops_the_worker_after_the_current_item(
    monkeypatch: pytest.MonkeyPatch, config_path: Path
) -> None:
    handlers: dict[int, Callable[[int, object], None]] = {}
    monkeypatch.setattr(cli_module, "signal", handlers.__setitem__)
    observed: dict[str, bool] = {}

    def fake_run_worker(
        _config: object, *, max_passes: int | None = None, stop_event: threading.Event
    ) -> None:
        handlers[SIGTERM](SIGTERM, None)
        observed["stopped"] = stop_event.is_set()

    monkeypatch.setattr(cli_module, "run_worker", fake_run_worker)

    cli_module.main(["--config", str(config_path)])

    assert observed == {"stopped": True}
    assert handlers[SIGINT] is handlers[SIGTERM]


def test_second_signal_exits_immediately() -> None:
    stop_event = threading.Event()
    handler = cli_module._stop_handler(stop_event)  # noqa: SLF001

    handler(SIGINT, None)
    with pytest.raises(SystemExit) as exc:
        handler(SIGINT, None)

    assert stop_event.is_set()
    assert exc.value.code == 1
