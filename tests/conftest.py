from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from snapsync.adapters.sqlalchemy.migrations import upgrade_head
from snapsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup

# Anything resolving the store from the environment must stay out of the real data dir.
os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def store_engine() -> Iterator[Engine]:
    """Migrated in-memory listing store; every connection sees the same database."""

    engine = create_engine("sqlite+pysqlite://", poolclass=StaticPool)
    upgrade_head(engine=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store_session(store_engine: Engine) -> Iterator[Session]:
    with Session(store_engine) as session:
        yield session


@pytest.fixture
def unit_of_work_factory(store_engine: Engine) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=store_engine, force=True)
    yield SqlAlchemyUnitOfWork
    shutdown()
