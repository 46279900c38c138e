"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from trailpack.adapters.sqlalchemy.mappings import catalog_entry_table
from trailpack.domain.catalog import CatalogEntry, TimestampField

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from trailpack.domain.time_windows import TimeWindow


class SqlAlchemyCatalogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_many(self, entries: Iterable[CatalogEntry]) -> int:
        """Insert or refresh entries keyed by ``(metadata_type, full_name)``."""

        written = 0
        for entry in entries:
            existing_id = self.session.execute(
                select(catalog_entry_table.c.id)
                .where(catalog_entry_table.c.metadata_type == entry.metadata_type)
                .where(catalog_entry_table.c.full_name == entry.full_name)
            ).scalar_one_or_none()
            values = {
                "metadata_type": entry.metadata_type,
                "full_name": entry.full_name,
                "created_date": entry.created_date,
                "last_modified_date": entry.last_modified_date,
            }
            if existing_id is None:
                self.session.execute(catalog_entry_table.insert().values(**values))
            else:
                self.session.execute(
                    catalog_entry_table.update()
                    .where(catalog_entry_table.c.id == existing_id)
                    .values(**values)
                )
            written += 1
        return written

    def candidates(
        self,
        *,
        metadata_type: str,
        timestamp_field: TimestampField,
        window: TimeWindow,
    ) -> list[CatalogEntry]:
        column = catalog_entry_table.c[timestamp_field.value]
        start, end = window.resolve()
        stmt = select(catalog_entry_table).where(
            catalog_entry_table.c.metadata_type == metadata_type
        )
        if start is not None:
            stmt = stmt.where(column >= start)
        if end is not None:
            stmt = stmt.where(column <= end)
        stmt = stmt.order_by(catalog_entry_table.c.full_name)

        return [
            CatalogEntry(
                metadata_type=row.metadata_type,
                full_name=row.full_name,
                created_date=row.created_date,
                last_modified_date=row.last_modified_date,
            )
            for row in self.session.execute(stmt)
        ]

    def count(self) -> int:
        stmt = select(func.count()).select_from(catalog_entry_table)
        return int(self.session.execute(stmt).scalar_one())

