"""Exact matching of change-log records against a metadata catalog.

A record matches a catalog entry when the entry's creation timestamp (for
``Created`` records) or last-modified timestamp (for ``Updated`` records) lies
within the tolerance window around the record's ``created_date``. When several
entries fall inside the window the one whose name occurs in the record's
display text wins; otherwise only a single in-window entry counts as exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.domain.model import ActionType, parse_timestamp
from trailpack.domain.time_windows import TimeWindow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime, timedelta

    from trailpack.domain.model import Record

log = getLogger(__name__)


class TimestampField(StrEnum):
    CREATED = "created_date"
    LAST_MODIFIED = "last_modified_date"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One metadata component as known to the catalog."""

    metadata_type: str
    full_name: str
    created_date: datetime
    last_modified_date: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_date", parse_timestamp(self.created_date))
        object.__setattr__(self, "last_modified_date", parse_timestamp(self.last_modified_date))

    def timestamp(self, timestamp_field: TimestampField) -> datetime:
        if timestamp_field is TimestampField.CREATED:
            return self.created_date
        return self.last_modified_date

    @property
    def short_name(self) -> str:
        """Member name without its parent prefix (``Account.Foo__c`` -> ``Foo__c``)."""

        return self.full_name.rsplit(".", 1)[-1]


def timestamp_field_for(record: Record) -> TimestampField:
    if record.action_type is ActionType.CREATED:
        return TimestampField.CREATED
    return TimestampField.LAST_MODIFIED


def match_window(record: Record, tolerance: timedelta) -> TimeWindow:
    return TimeWindow.around(record.created_date, tolerance)


def match_catalog_entry(
    record: Record,
    candidates: Sequence[CatalogEntry],
    *,
    tolerance: timedelta,
) -> CatalogEntry | None:
    """Return the catalog entry exactly matching ``record`` or ``None``."""

    timestamp_field = timestamp_field_for(record)
    window = match_window(record, tolerance)
    in_window = [
        entry
        for entry in candidates
        if entry.metadata_type == record.metadata_type
        and window.contains(entry.timestamp(timestamp_field))
    ]
    if not in_window:
        return None

    display = record.display.casefold()
    named = [
        entry
        for entry in in_window
        if entry.short_name.casefold() in display or entry.full_name.casefold() in display
    ]
    if len(named) == 1:
        return named[0]
    if len(named) > 1:
        # Prefer the longest name so "Foo__c" does not shadow "Foo_Bar__c".
        named.sort(key=lambda entry: (-len(entry.short_name), entry.full_name))
        return named[0]
    if len(in_window) == 1:
        return in_window[0]

    log.debug(
        "Ambiguous catalog match for record %s: %s candidates in window",
        record.id,
        len(in_window),
    )
    return None
