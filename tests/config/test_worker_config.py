from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003

import pytest

from snapsync.config import (
    ConfigurationError,
    InvalidConfigurationFile,
    MissingConfigurationError,
    get_worker_config,
)
from snapsync.config.worker import DEFAULT_PRICE_TIMEOUT_MIN, load_worker_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SNAPSHOT_API_KEY", "SNAPSYNC_CONFIG", "SNAPSYNC_ITEM_LIST"):
        monkeypatch.delenv(name, raising=False)


def _write_config(path: Path, document: object) -> Path:
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_full_document_is_loaded(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "config.json",
        {
            "apiKey": "file-key",
            "excludedListingDescriptions": ["Exorcism", "Spelled"],
            "blockedAttributes": {"Team Spirit": 12073019, "Pink": "15185211"},
            "alwaysQuerySnapshotAPI": True,
            "priceTimeoutMin": 10,
            "database": {"host": "db", "schema": "tf2"},
            "unrelatedKey": "ignored",
        },
    )

    config = get_worker_config(config_path=path)

    assert config.api_key == "file-key"
    assert config.excluded_listing_descriptions == ("Exorcism", "Spelled")
    assert config.blocked_attributes == {"Team Spirit": 12073019, "Pink": "15185211"}
    assert config.always_query_snapshot_api is True
    assert config.pass_interval_seconds == 600.0
    assert config.database.host == "db"
    assert config.database.schema_name == "tf2"


def test_environment_api_key_overrides_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = _write_config(tmp_path / "config.json", {"apiKey": "file-key"})
    monkeypatch.setenv("SNAPSHOT_API_KEY", "env-key")

    assert get_worker_config(config_path=path).api_key == "env-key"


def test_missing_file_uses_defaults_with_env_key(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SNAPSHOT_API_KEY", "env-key")
    monkeypatch.setenv("SNAPSYNC_ITEM_LIST", str(tmp_path / "items.json"))

    config = get_worker_config(config_path=tmp_path / "absent.json")

    assert config.excluded_listing_descriptions == ()
    assert config.blocked_attributes == {}
    assert config.always_query_snapshot_api is False
    assert config.price_timeout_min == DEFAULT_PRICE_TIMEOUT_MIN
    assert config.item_list_path == tmp_path / "items.json"


def test_missing_api_key_is_a_configuration_error(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "config.json", {"apiKey": "   "})

    with pytest.raises(MissingConfigurationError, match="SNAPSHOT_API_KEY"):
        get_worker_config(config_path=path)


def test_config_path_can_come_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = _write_config(tmp_path / "custom.json", {"apiKey": "file-key"})
    monkeypatch.setenv("SNAPSYNC_CONFIG", str(path))

    assert get_worker_config().api_key == "file-key"


@pytest.mark.parametrize(
    "content",
    ["{broken", '{"priceTimeoutMin": -1}', '{"excludedListingDescriptions": "Spelled"}'],
)
def test_invalid_document_raises_configuration_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_worker_settings(path)

    assert isinstance(exc.value, InvalidConfigurationFile)
    assert exc.value.path == path
