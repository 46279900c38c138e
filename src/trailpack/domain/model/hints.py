"""Presentation hints derived from a record's resolution and action state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .record import Record

NEEDS_RESOLUTION_LABEL = "Needs Resolution"


@dataclass(frozen=True, slots=True)
class RecordHints:
    resolution_icon: str
    resolution_label: str
    action_icon: str
    action_tone: str


def derive_hints(record: Record) -> RecordHints:
    """Pure function of ``api_name`` and ``action_type``."""

    resolved = record.is_resolved
    created = record.is_created
    return RecordHints(
        resolution_icon="check" if resolved else "warning",
        resolution_label="" if resolved else NEEDS_RESOLUTION_LABEL,
        action_icon="add" if created else "edit",
        action_tone="success" if created else "default",
    )
