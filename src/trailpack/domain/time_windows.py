"""Utilities for constraining lookups to specific time windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Time window values must include timezone information")
    return value.astimezone(UTC)


def _ensure_aware(value: datetime | None) -> datetime | None:
    return None if value is None else _as_utc(value)


@dataclass(frozen=True)
class TimeWindow:
    """Describe temporal bounds for a query, either absolute or relative."""

    start: datetime | None = None
    end: datetime | None = None
    lookback: timedelta | None = None

    @classmethod
    def around(cls, anchor: datetime, tolerance: timedelta) -> TimeWindow:
        """Closed window of ``tolerance`` on either side of ``anchor``."""

        if tolerance < timedelta(0):
            raise ValueError("Tolerance must be non-negative")
        aware = _as_utc(anchor)
        return cls(start=aware - tolerance, end=aware + tolerance)

    def resolve(self, *, clock: Clock = _utcnow) -> tuple[datetime | None, datetime | None]:
        """Resolve the window into concrete UTC timestamps."""

        resolved_end = _ensure_aware(self.end)
        resolved_start = _ensure_aware(self.start)

        if self.lookback is not None:
            if self.lookback < timedelta(0):
                raise ValueError("Lookback duration must be non-negative")
            anchor = resolved_end or clock()
            if anchor.tzinfo is None:
                anchor = anchor.replace(tzinfo=UTC)
            anchor = anchor.astimezone(UTC)
            start_from_lookback = anchor - self.lookback
            if resolved_start is None:
                resolved_start = start_from_lookback
            else:
                resolved_start = max(resolved_start, start_from_lookback)
            if resolved_end is None:
                resolved_end = anchor

        if resolved_start and resolved_end and resolved_start > resolved_end:
            raise ValueError("Time window start must be before end")

        return resolved_start, resolved_end

    def contains(self, value: datetime, *, clock: Clock = _utcnow) -> bool:
        start, end = self.resolve(clock=clock)
        moment = _as_utc(value)
        if start is not None and moment < start:
            return False
        return not (end is not None and moment > end)


__all__ = ["Clock", "TimeWindow"]
