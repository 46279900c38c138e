"""SQLAlchemy adapter package for the local metadata catalog."""

from __future__ import annotations

from .mappings import catalog_entry_table, create_all_tables, metadata
from .repositories import SqlAlchemyCatalogRepository
from .resolver import CatalogResolver
from .unit_of_work import CatalogUnitOfWork, StartupError, is_started, shutdown, startup

__all__ = [
    "CatalogResolver",
    "CatalogUnitOfWork",
    "SqlAlchemyCatalogRepository",
    "StartupError",
    "catalog_entry_table",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
