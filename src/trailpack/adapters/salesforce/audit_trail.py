"""Change-log source backed by the ``SetupAuditTrail`` object."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.config.resolution import DEFAULT_AUDIT_LOOKBACK_DAYS, DEFAULT_AUDIT_ROW_LIMIT
from trailpack.domain.time_windows import TimeWindow

from .soql import soql_datetime
from .translator import parse_audit_trail_row

if TYPE_CHECKING:
    from trailpack.domain.model import Record

    from .client import SalesforceClient

log = getLogger(__name__)


def _default_window() -> TimeWindow:
    return TimeWindow(lookback=timedelta(days=DEFAULT_AUDIT_LOOKBACK_DAYS))


@dataclass(slots=True)
class SetupAuditTrailSource:
    """Fetch recent setup changes, newest first."""

    client: SalesforceClient
    window: TimeWindow = field(default_factory=_default_window)
    limit: int = DEFAULT_AUDIT_ROW_LIMIT

    def build_query(self) -> str:
        start, end = self.window.resolve()
        clauses: list[str] = []
        if start is not None:
            clauses.append(f"CreatedDate >= {soql_datetime(start)}")
        if end is not None:
            clauses.append(f"CreatedDate <= {soql_datetime(end, round_up=True)}")
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return (
            "SELECT Id, CreatedDate, CreatedBy.Name, Section, Action, Display "
            f"FROM SetupAuditTrail{where} ORDER BY CreatedDate DESC LIMIT {self.limit}"
        )

    async def __call__(self) -> list[Record]:
        rows = await self.client.query(self.build_query())
        records = [parse_audit_trail_row(row) for row in rows]
        log.info("Fetched %s setup audit trail entries", len(records))
        return records
