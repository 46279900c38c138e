"""Record model for change-log entries under resolution."""

from __future__ import annotations

from .enums import UNKNOWN_METADATA_TYPE, ActionType, MetadataType, RecordFilter
from .hints import NEEDS_RESOLUTION_LABEL, RecordHints, derive_hints
from .master_set import MasterSet
from .record import Record, parse_timestamp, record_from_entry

__all__ = [
    "NEEDS_RESOLUTION_LABEL",
    "UNKNOWN_METADATA_TYPE",
    "ActionType",
    "MasterSet",
    "MetadataType",
    "Record",
    "RecordFilter",
    "RecordHints",
    "derive_hints",
    "parse_timestamp",
    "record_from_entry",
]
