"""Deterministic resolver over the local catalog snapshot."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.config.resolution import DEFAULT_MATCH_TOLERANCE
from trailpack.domain.catalog import match_catalog_entry, match_window, timestamp_field_for

from .unit_of_work import CatalogUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import timedelta

    from trailpack.domain.model import Record

log = getLogger(__name__)


@dataclass(slots=True)
class CatalogResolver:
    """Exact-match resolver reading candidates from the SQLite catalog.

    Returns only the records that matched.
    """

    unit_of_work_factory: Callable[[], CatalogUnitOfWork] = field(default=CatalogUnitOfWork)
    tolerance: timedelta = DEFAULT_MATCH_TOLERANCE

    async def __call__(self, records: Sequence[Record]) -> list[Record]:
        matched: list[Record] = []
        with self.unit_of_work_factory() as uow:
            for record in records:
                candidates = uow.catalog.candidates(
                    metadata_type=record.metadata_type,
                    timestamp_field=timestamp_field_for(record),
                    window=match_window(record, self.tolerance),
                )
                entry = match_catalog_entry(record, candidates, tolerance=self.tolerance)
                if entry is not None:
                    matched.append(record.with_api_name(entry.full_name))
        log.info("Catalog matched %s of %s record(s)", len(matched), len(records))
        return matched
