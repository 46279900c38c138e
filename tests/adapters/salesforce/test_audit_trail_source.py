from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import httpx

from trailpack.adapters.salesforce import SalesforceClient, SetupAuditTrailSource
from trailpack.domain.time_windows import TimeWindow
from tests.helpers.http import INSTANCE_URL, make_client_factory, salesforce_config


def _row(row_id: str, action: str, display: str) -> dict[str, object]:
    return {
        "Id": row_id,
        "CreatedDate": "2024-05-01T12:00:00.000Z",
        "CreatedBy": {"Name": "Ada Admin"},
        "Section": "Customize Accounts",
        "Action": action,
        "Display": display,
    }


def test_build_query_bounds_created_date() -> None:
    window = TimeWindow(
        start=datetime(2024, 4, 24, 12, tzinfo=UTC),
        end=datetime(2024, 5, 1, 12, 0, 0, 500000, tzinfo=UTC),
    )
    client = SalesforceClient(config=salesforce_config())
    source = SetupAuditTrailSource(client=client, window=window)

    assert source.build_query() == (
        "SELECT Id, CreatedDate, CreatedBy.Name, Section, Action, Display "
        "FROM SetupAuditTrail WHERE CreatedDate >= 2024-04-24T12:00:00Z "
        "AND CreatedDate <= 2024-05-01T12:00:01Z ORDER BY CreatedDate DESC LIMIT 500"
    )


def test_source_returns_records_in_query_order() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "totalSize": 2,
                "done": True,
                "records": [
                    _row("2", "changedCF", "Changed Region custom field"),
                    _row("1", "createdCF", "Created Tier custom field"),
                ],
            },
        )

    client = SalesforceClient(
        config=salesforce_config(),
        client_factory=make_client_factory(handler, base_url=INSTANCE_URL),
    )
    source = SetupAuditTrailSource(client=client, limit=10)

    records = asyncio.run(source())

    assert [record.id for record in records] == ["2", "1"]
    assert [record.action_type.value for record in records] == ["Updated", "Created"]
    assert {record.metadata_type for record in records} == {"CustomField"}
