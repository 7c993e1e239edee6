"""Alembic migrations for the listing store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from snapsync.config.storage import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent


def alembic_config(
    *,
    schema: str | None = None,
    connection: Connection | None = None,
    database_uri: str | None = None,
) -> Config:
    """Build an Alembic config pointing at the bundled revisions.

    Scripts are located relative to this package, so an installed worker migrates
    without a source checkout. ``schema`` holds both the listings table and the
    Alembic version table.
    """

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    if database_uri is not None:
        # ConfigParser interpolation would choke on percent-encoded passwords.
        config.set_main_option("sqlalchemy.url", database_uri.replace("%", "%%"))
    config.attributes["schema"] = schema
    config.attributes["connection"] = connection
    return config


def upgrade_head(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    schema: str | None = None,
) -> None:
    """Bring the listing store up to the latest revision."""

    if engine is None:
        uri = database_uri or get_database_config().uri
        command.upgrade(alembic_config(schema=schema, database_uri=uri), "head")
        return
    with engine.begin() as connection:
        command.upgrade(alembic_config(schema=schema, connection=connection), "head")
