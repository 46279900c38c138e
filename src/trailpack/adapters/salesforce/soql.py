"""SOQL literal helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

_SOQL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def soql_datetime(value: datetime, *, round_up: bool = False) -> str:
    """Format an aware datetime as a SOQL literal at second precision."""

    if value.tzinfo is None:
        raise ValueError("SOQL datetimes must include timezone information")
    moment = value.astimezone(UTC)
    if round_up and moment.microsecond:
        moment = moment.replace(microsecond=0) + timedelta(seconds=1)
    return moment.strftime(_SOQL_DATETIME_FORMAT)


def soql_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
