from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from trailpack.adapters.sqlalchemy.unit_of_work import CatalogUnitOfWork, shutdown, startup

os.environ.setdefault("CATALOG_DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def catalog_unit_of_work(sqlite_engine: Engine) -> Iterator[Callable[[], CatalogUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> CatalogUnitOfWork:
        return CatalogUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
