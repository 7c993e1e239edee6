"""Where the listing store and the HTTP cache live."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from sqlalchemy import URL, make_url

from .env import env_path, optional_env_var

if TYPE_CHECKING:
    from .worker import DatabaseSettings

APP_DIR_NAME: Final[str] = "snapsync"
DEFAULT_DB_FILENAME: Final[str] = "snapsync.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local files used when no database server is configured."""

    data_dir: Path

    def _ensure_dir(self) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self._ensure_dir() / DEFAULT_DB_FILENAME}"

    def http_cache_path(self) -> Path:
        return self._ensure_dir() / HTTP_CACHE_FILENAME


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    schema: str | None = None


def get_storage_config() -> StorageConfig:
    """``SNAPSYNC_DATA_DIR``, else ``$XDG_DATA_HOME/snapsync``."""

    xdg_data_home = env_path("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))
    data_dir = env_path("SNAPSYNC_DATA_DIR", str(xdg_data_home / APP_DIR_NAME))
    return StorageConfig(data_dir=data_dir.resolve())


def _postgres_uri(settings: DatabaseSettings) -> str:
    url = URL.create(
        "postgresql+psycopg",
        username=settings.user,
        password=settings.password,
        host=settings.host,
        port=settings.port,
        database=settings.name,
    )
    return url.render_as_string(hide_password=False)


def _schema_for(uri: str, schema: str | None) -> str | None:
    if schema and make_url(uri).get_backend_name() != "postgresql":
        log.warning(f"Ignoring database schema {schema!r}: only PostgreSQL stores use schemas")
        return None
    return schema


def get_database_config(
    *,
    settings: DatabaseSettings | None = None,
    storage: StorageConfig | None = None,
) -> DatabaseConfig:
    """Resolve the listing store location.

    ``DATABASE_URI`` wins over the configured connection block, which wins over
    a SQLite file in the data directory. The configured schema only applies to
    PostgreSQL URIs.
    """

    schema = settings.schema_name if settings is not None else None
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri:
        uri = env_uri
    elif settings is not None and settings.host:
        uri = _postgres_uri(settings)
    else:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, schema=_schema_for(uri, schema))


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path()
