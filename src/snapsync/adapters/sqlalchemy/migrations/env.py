"""Alembic environment for the listing store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from alembic import context
from sqlalchemy import create_engine, pool

from snapsync.adapters.sqlalchemy.mappings import metadata
from snapsync.config.storage import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config
schema: str | None = config.attributes.get("schema")


def _url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _configure(**options: Any) -> None:
    context.configure(
        target_metadata=metadata,
        version_table_schema=schema,
        # SQLite only supports most ALTERs through table rebuilds.
        render_as_batch=True,
        **options,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    _configure(url=_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        _migrate(connection)
        return
    engine = create_engine(_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as fresh_connection:
            _migrate(fresh_connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
