"""Ordered, id-keyed collection of every record known to a session."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, overload

from trailpack.domain.errors import DuplicateRecordError

if TYPE_CHECKING:
    from .record import Record


class MasterSet(Sequence["Record"]):
    """Immutable insertion-ordered record collection with at most one record per id."""

    __slots__ = ("_index", "_records")

    def __init__(self, records: Iterable[Record] = ()) -> None:
        ordered = tuple(records)
        index: dict[str, int] = {}
        for position, record in enumerate(ordered):
            if record.id in index:
                raise DuplicateRecordError(record.id)
            index[record.id] = position
        self._records = ordered
        self._index = index

    @overload
    def __getitem__(self, position: int) -> Record: ...
    @overload
    def __getitem__(self, position: slice) -> Sequence[Record]: ...
    def __getitem__(self, position: int | slice) -> Record | Sequence[Record]:
        return self._records[position]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._index
        return item in self._records

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MasterSet):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"MasterSet({len(self._records)} records)"

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(record.id for record in self._records)

    def get(self, record_id: str) -> Record | None:
        position = self._index.get(record_id)
        if position is None:
            return None
        return self._records[position]

    def select(self, record_ids: Iterable[str]) -> list[Record]:
        """Return the records for ``record_ids`` in master order, skipping unknown ids."""

        wanted = set(record_ids)
        return [record for record in self._records if record.id in wanted]

    def replace_records(self, replacements: dict[str, Record]) -> MasterSet:
        """Return a new master set with records swapped by id, order preserved."""

        if not replacements:
            return self
        return MasterSet(replacements.get(record.id, record) for record in self._records)
