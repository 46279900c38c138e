"""The change-log record under resolution."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .enums import UNKNOWN_METADATA_TYPE, ActionType

if TYPE_CHECKING:
    from collections.abc import Mapping

# Raw collaborators speak camelCase; the domain speaks snake_case.
_WIRE_ALIASES: dict[str, str] = {
    "createdDate": "created_date",
    "createdBy": "created_by",
    "metadataType": "metadata_type",
    "apiName": "api_name",
    "actionType": "action_type",
}


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse an ISO-8601 / Salesforce timestamp into an aware UTC datetime."""

    if isinstance(value, datetime):
        parsed = value
    else:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        # Salesforce emits "+0000" offsets which fromisoformat accepts since 3.11.
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ValueError(f"Invalid timestamp: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class Record:
    """One change-log entry plus its resolution state.

    ``is_resolved`` is derived from ``api_name`` so the two can never disagree.
    Records are immutable; the merge engine produces replacements.
    """

    id: str
    created_date: datetime
    section: str
    action: str
    display: str
    action_type: ActionType
    created_by: str | None = None
    metadata_type: str = UNKNOWN_METADATA_TYPE
    api_name: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Record id must not be empty")
        object.__setattr__(self, "api_name", _blank_to_none(self.api_name))
        object.__setattr__(self, "action_type", ActionType(self.action_type))
        object.__setattr__(self, "created_date", parse_timestamp(self.created_date))
        if not self.metadata_type or not self.metadata_type.strip():
            object.__setattr__(self, "metadata_type", UNKNOWN_METADATA_TYPE)

    @property
    def is_resolved(self) -> bool:
        return self.api_name is not None

    @property
    def is_created(self) -> bool:
        return self.action_type is ActionType.CREATED

    def with_api_name(self, api_name: str | None) -> Record:
        return replace(self, api_name=api_name)

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase wire shape handed to resolver collaborators."""

        return {
            "id": self.id,
            "createdDate": self.created_date.isoformat(),
            "createdBy": self.created_by,
            "section": self.section,
            "action": self.action,
            "display": self.display,
            "metadataType": self.metadata_type,
            "apiName": self.api_name,
            "isResolved": self.is_resolved,
            "actionType": self.action_type.value,
        }


def record_from_entry(entry: Mapping[str, Any] | Record) -> Record:
    """Build a :class:`Record` from one raw ingested entry.

    Accepts the camelCase payload delivered by collaborators as well as snake_case
    keys. ``isResolved`` in the payload is ignored; it is recomputed from the api name.
    """

    if isinstance(entry, Record):
        return entry

    values: dict[str, Any] = {}
    for key, value in entry.items():
        values[_WIRE_ALIASES.get(key, key)] = value

    try:
        return Record(
            id=str(values["id"]),
            created_date=parse_timestamp(values["created_date"]),
            created_by=values.get("created_by"),
            section=str(values.get("section") or ""),
            action=str(values.get("action") or ""),
            display=str(values.get("display") or ""),
            metadata_type=str(values.get("metadata_type") or UNKNOWN_METADATA_TYPE),
            api_name=values.get("api_name"),
            action_type=ActionType(values["action_type"]),
        )
    except KeyError as exc:
        raise ValueError(f"Change-log entry is missing field {exc.args[0]!r}") from exc
