"""SQLAlchemy table metadata for the local metadata catalog."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        # SQLite stores naive values; normalise to UTC before the offset is dropped.
        return value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

catalog_entry_table = Table(
    "catalog_entry",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("metadata_type", String, nullable=False),
    Column("full_name", String, nullable=False),
    Column("created_date", UTCDateTime, nullable=False),
    Column("last_modified_date", UTCDateTime, nullable=False),
    UniqueConstraint("metadata_type", "full_name"),
    Index("ix_catalog_entry_type_created", "metadata_type", "created_date"),
    Index("ix_catalog_entry_type_modified", "metadata_type", "last_modified_date"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the catalog metadata."""

    log.info("Creating catalog tables")
    metadata.create_all(engine)
