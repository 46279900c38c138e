"""SQLAlchemy-backed unit of work for the local metadata catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from trailpack.adapters.sqlalchemy.mappings import create_all_tables
from trailpack.adapters.sqlalchemy.repositories import SqlAlchemyCatalogRepository
from trailpack.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "Catalog adapter not initialised. Call trailpack.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, tables, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError("Catalog adapter already initialised. Pass force=True to reconfigure.")

    resolved_engine = engine or create_engine(
        database_uri or get_storage_config().catalog_uri(), future=True
    )
    create_all_tables(resolved_engine)
    _STATE.engine = resolved_engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class CatalogUnitOfWork:
    """Unit of work managing a SQLAlchemy session for catalog access."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None
        self._catalog: SqlAlchemyCatalogRepository | None = None

    def __enter__(self) -> CatalogUnitOfWork:
        self._session = self.session_factory()
        self._catalog = SqlAlchemyCatalogRepository(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self._session = None
        self._catalog = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @property
    def catalog(self) -> SqlAlchemyCatalogRepository:
        if self._catalog is None:
            raise StartupError("Unit of work session not initialised")
        return self._catalog

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
