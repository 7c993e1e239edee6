"""Engine lifecycle and unit of work for the listing store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from snapsync.adapters.sqlalchemy.migrations import upgrade_head
from snapsync.adapters.sqlalchemy.repositories import SqlAlchemyListingRepository
from snapsync.config.storage import get_database_config
from snapsync.domain.errors import StoreWriteFailed
from snapsync.domain.ports import ListingRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

POOL_TIMEOUT_SECONDS = 30

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The listing store was used before ``startup()`` or started twice."""


@dataclass(slots=True)
class _StoreState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    def session_factory(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError(
                "Listing store not started. Call snapsync.adapters.sqlalchemy.unit_of_work."
                "startup() before opening a unit of work."
            )
        return self.sessions


_STATE = _StoreState()


def _create_engine(database_uri: str) -> Engine:
    options: dict[str, Any] = {}
    if not database_uri.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_timeout=POOL_TIMEOUT_SECONDS)
    return create_engine(database_uri, **options)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    schema: str | None = None,
    force: bool = False,
) -> Engine:
    """Connect to the listing store and migrate it to the latest revision.

    With ``schema`` set the listings table lives in that schema, and statements are
    routed there through a schema translate map.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("Listing store already started. Pass force=True to reconfigure.")

    if engine is None:
        engine = _create_engine(database_uri or get_database_config().uri)
    upgrade_head(engine=engine, schema=schema)
    if schema:
        engine = engine.execution_options(schema_translate_map={None: schema})

    _STATE.bind(engine)
    log.info(f"Listing store ready at {engine.url.render_as_string(hide_password=True)}")
    return engine


def configured_engine() -> Engine | None:
    return _STATE.engine


def shutdown() -> None:
    """Dispose the engine and forget it; safe to call when not started."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block.

    Leaving the block without ``commit()`` discards the block's changes.
    """

    def __init__(self) -> None:
        self._sessions = _STATE.session_factory()
        self._session: Session | None = None
        self._repositories: ListingRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._sessions()
        self._repositories = ListingRepositories(
            listings=SqlAlchemyListingRepository(self._session)
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self._open_session()
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def repositories(self) -> ListingRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with block")
        return self._repositories

    def commit(self) -> None:
        session = self._open_session()
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreWriteFailed(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        self._open_session().rollback()

    def _open_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session


if TYPE_CHECKING:
    from snapsync.domain.ports import ListingUnitOfWork

    _uow_check: ListingUnitOfWork = SqlAlchemyUnitOfWork()
