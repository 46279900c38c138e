"""Persistence port for a local metadata catalog snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from trailpack.domain.catalog import CatalogEntry, TimestampField
    from trailpack.domain.time_windows import TimeWindow


class CatalogRepository(Protocol):
    def add_many(self, entries: Iterable[CatalogEntry]) -> int: ...

    def candidates(
        self,
        *,
        metadata_type: str,
        timestamp_field: TimestampField,
        window: TimeWindow,
    ) -> Sequence[CatalogEntry]: ...

    def count(self) -> int: ...


__all__ = ["CatalogRepository"]
