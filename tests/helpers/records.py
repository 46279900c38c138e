from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from trailpack.domain.model import ActionType, Record

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def make_record(
    record_id: str,
    *,
    section: str = "Customize Accounts",
    action: str = "changedCF",
    display: str | None = None,
    action_type: ActionType = ActionType.UPDATED,
    metadata_type: str = "CustomField",
    api_name: str | None = None,
    minutes: int = 0,
) -> Record:
    return Record(
        id=record_id,
        created_date=BASE_TIME + timedelta(minutes=minutes),
        section=section,
        action=action,
        display=display if display is not None else f"Changed field {record_id}",
        action_type=action_type,
        metadata_type=metadata_type,
        api_name=api_name,
    )


def make_entry(record_id: str, **overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "id": record_id,
        "createdDate": "2024-05-01T12:00:00.000+0000",
        "createdBy": "Ada Admin",
        "section": "Customize Accounts",
        "action": "changedCF",
        "display": f"Changed field {record_id}",
        "metadataType": "CustomField",
        "apiName": None,
        "actionType": "Updated",
    }
    entry.update(overrides)
    return entry


class FakeDeterministicResolver:
    """Returns canned api names by record id; unknown ids are omitted."""

    def __init__(self, names: Mapping[str, str] | None = None, *, error: Exception | None = None):
        self.names = dict(names or {})
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    async def __call__(self, records: Sequence[Record]) -> list[Record]:
        self.calls.append(tuple(record.id for record in records))
        if self.error is not None:
            raise self.error
        return [
            record.with_api_name(self.names[record.id])
            for record in records
            if record.id in self.names
        ]


class FakeGenerativeResolver:
    def __init__(self, answers: Mapping[str, str] | None = None, *, error: Exception | None = None):
        self.answers = dict(answers or {})
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    async def __call__(self, descriptions: Sequence[str]) -> dict[str, str]:
        self.calls.append(tuple(descriptions))
        if self.error is not None:
            raise self.error
        return {key: value for key, value in self.answers.items() if key in descriptions}
