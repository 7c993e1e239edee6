"""Worker configuration loaded from ``config.json`` and the environment."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .env import env_path, optional_env_var, require_env_var
from .errors import InvalidConfigurationFile

DEFAULT_CONFIG_PATH: Final[str] = "config.json"
DEFAULT_ITEM_LIST_PATH: Final[str] = "files/item_list.json"
DEFAULT_PRICE_TIMEOUT_MIN: Final[int] = 5
API_KEY_ENV: Final[str] = "SNAPSHOT_API_KEY"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class DatabaseSettings(_ConfigModel):
    host: str | None = None
    port: int | None = None
    name: str | None = None
    user: str | None = None
    password: str | None = None
    schema_name: str | None = Field(default=None, alias="schema")


class WorkerSettings(_ConfigModel):
    """Shape of the JSON configuration document."""

    api_key: str | None = Field(default=None, alias="apiKey")
    excluded_listing_descriptions: list[str] = Field(
        default_factory=list, alias="excludedListingDescriptions"
    )
    blocked_attributes: dict[str, float | int | str] = Field(
        default_factory=dict, alias="blockedAttributes"
    )
    always_query_snapshot_api: bool = Field(default=False, alias="alwaysQuerySnapshotAPI")
    price_timeout_min: int = Field(default=DEFAULT_PRICE_TIMEOUT_MIN, ge=0, alias="priceTimeoutMin")
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)


@dataclass(frozen=True, slots=True)
class WorkerConfig:
    api_key: str
    excluded_listing_descriptions: tuple[str, ...] = ()
    blocked_attributes: dict[str, float | int | str] = field(default_factory=dict)
    always_query_snapshot_api: bool = False
    price_timeout_min: int = DEFAULT_PRICE_TIMEOUT_MIN
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    item_list_path: Path = Path(DEFAULT_ITEM_LIST_PATH)

    @property
    def pass_interval_seconds(self) -> float:
        return float(self.price_timeout_min * 60)


def load_worker_settings(path: Path) -> WorkerSettings:
    """Parse and validate the JSON configuration document at ``path``."""

    if not path.exists():
        return WorkerSettings()
    try:
        with path.open(encoding="utf-8") as handle:
            document = json.load(handle)
        return WorkerSettings.model_validate(document)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise InvalidConfigurationFile(path, str(exc)) from exc


def get_worker_config(*, config_path: Path | None = None) -> WorkerConfig:
    """Build the worker configuration.

    ``SNAPSHOT_API_KEY`` overrides ``apiKey`` from the file; one of them must be set.
    """

    path = config_path or env_path("SNAPSYNC_CONFIG", DEFAULT_CONFIG_PATH)
    settings = load_worker_settings(path)

    api_key = optional_env_var(API_KEY_ENV) or (settings.api_key or "").strip()
    if not api_key:
        api_key = require_env_var(API_KEY_ENV, hint="or set apiKey in the configuration file")

    return WorkerConfig(
        api_key=api_key,
        excluded_listing_descriptions=tuple(settings.excluded_listing_descriptions),
        blocked_attributes=dict(settings.blocked_attributes),
        always_query_snapshot_api=settings.always_query_snapshot_api,
        price_timeout_min=settings.price_timeout_min,
        database=settings.database,
        item_list_path=env_path("SNAPSYNC_ITEM_LIST", DEFAULT_ITEM_LIST_PATH),
    )
