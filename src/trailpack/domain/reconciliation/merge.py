"""Pure reconciliation of resolver output into the master set.

``merge`` never mutates its inputs and never adds or removes records; it only
replaces records whose ids are already present. Three policies exist:

* ``OVERWRITE`` - replace the master record with the update (full record) or
  overlay the fields of a :class:`RecordPatch`.
* ``FILL_ONLY_BY_ID`` - set ``api_name`` on unresolved records keyed by id.
* ``FILL_ONLY_BY_KEY`` - set ``api_name`` on unresolved records keyed by a
  correlation key (see :mod:`trailpack.domain.reconciliation.keys`).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from trailpack.domain.model import MasterSet, Record

from .keys import DescriptionKeyStrategy

if TYPE_CHECKING:
    from .keys import CorrelationStrategy

log = getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "section", "action", "display", "action_type"})
_RECORD_FIELDS = frozenset(f.name for f in fields(Record))


class MergePolicy(StrEnum):
    OVERWRITE = "overwrite"
    FILL_ONLY_BY_ID = "fill_only_by_id"
    FILL_ONLY_BY_KEY = "fill_only_by_key"


@dataclass(frozen=True, slots=True)
class RecordPatch:
    """Field-level update for one record, applied with the overwrite policy."""

    record_id: str
    changes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        unknown = set(self.changes) - _RECORD_FIELDS
        if unknown:
            raise ValueError(f"Unknown record fields in patch: {sorted(unknown)}")
        frozen = set(self.changes) & _IMMUTABLE_FIELDS
        if frozen:
            raise ValueError(f"Immutable record fields in patch: {sorted(frozen)}")
        object.__setattr__(self, "changes", MappingProxyType(dict(self.changes)))

    def apply(self, record: Record) -> Record:
        return replace(record, **self.changes)


type OverwriteUpdates = Iterable[Record | RecordPatch]
type FillUpdates = Mapping[str, str]


def merge(
    master: MasterSet,
    updates: OverwriteUpdates | FillUpdates,
    policy: MergePolicy,
    *,
    correlation: CorrelationStrategy | None = None,
) -> MasterSet:
    """Return a new master set with ``updates`` folded in according to ``policy``."""

    if policy is MergePolicy.OVERWRITE:
        if isinstance(updates, Mapping):
            raise TypeError("Overwrite merges expect records or patches, not a mapping")
        replacements = _overwrite(master, updates)
    else:
        if not isinstance(updates, Mapping):
            raise TypeError(f"{policy} merges expect a mapping of key to api name")
        if policy is MergePolicy.FILL_ONLY_BY_ID:
            replacements = _fill_only(master, updates, key_for=_record_id)
        else:
            strategy = correlation or DescriptionKeyStrategy()
            replacements = _fill_only(master, updates, key_for=strategy.key_for)

    log.debug("Merge %s replaced %s record(s)", policy, len(replacements))
    return master.replace_records(replacements)


def _record_id(record: Record) -> str:
    return record.id


def _overwrite(master: MasterSet, updates: OverwriteUpdates) -> dict[str, Record]:
    replacements: dict[str, Record] = {}
    for update in updates:
        if isinstance(update, RecordPatch):
            current = replacements.get(update.record_id) or master.get(update.record_id)
            if current is None:
                log.debug("Ignoring patch for unknown record %s", update.record_id)
                continue
            replacements[update.record_id] = update.apply(current)
            continue
        if update.id not in master:
            log.debug("Ignoring update for unknown record %s", update.id)
            continue
        replacements[update.id] = update
    return replacements


def _fill_only(
    master: MasterSet,
    updates: FillUpdates,
    *,
    key_for: Callable[[Record], str],
) -> dict[str, Record]:
    replacements: dict[str, Record] = {}
    for record in master:
        if record.is_resolved:
            continue
        value = updates.get(key_for(record))
        if value is None or not value.strip():
            continue
        replacements[record.id] = record.with_api_name(value)
    return replacements
