from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx

from trailpack.adapters.salesforce import TOOLING_QUERY_SPECS, SalesforceClient, ToolingResolver
from trailpack.domain.catalog import TimestampField
from trailpack.domain.model import ActionType
from tests.helpers.http import INSTANCE_URL, make_client_factory, salesforce_config
from tests.helpers.records import make_record


def _page(records: list[dict[str, object]]) -> httpx.Response:
    return httpx.Response(200, json={"totalSize": len(records), "done": True, "records": records})


def _handler(queries: list[str]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        soql = request.url.params["q"]
        queries.append(soql)
        if "FROM CustomField" in soql:
            return _page(
                [
                    {
                        "Id": "00N1",
                        "CreatedDate": "2023-01-01T00:00:00.000Z",
                        "LastModifiedDate": "2024-05-01T12:01:00.000Z",
                        "DeveloperName": "Region",
                        "TableEnumOrId": "01I5g000000abcd",
                    }
                ]
            )
        if "FROM CustomObject" in soql:
            return _page([{"Id": "01I5g000000abcdEAA", "DeveloperName": "Project"}])
        if "FROM ApexClass" in soql:
            return _page(
                [
                    {
                        "Id": "01p1",
                        "CreatedDate": "2024-05-01T12:00:30.000Z",
                        "LastModifiedDate": "2024-05-01T12:00:30.000Z",
                        "Name": "LeadService",
                    },
                    {
                        "Id": "01p2",
                        "CreatedDate": "2024-05-01T11:59:10.000Z",
                        "LastModifiedDate": "2024-05-01T11:59:10.000Z",
                        "Name": "LeadServiceTest",
                    },
                ]
            )
        return _page([])

    return handler


def test_tooling_resolver_returns_only_matched_records() -> None:
    queries: list[str] = []
    client = SalesforceClient(
        config=salesforce_config(),
        client_factory=make_client_factory(_handler(queries), base_url=INSTANCE_URL),
    )
    resolver = ToolingResolver(client=client)
    records = [
        make_record("1", display="Changed Region custom field on Project"),
        make_record(
            "2",
            section="Apex Class",
            display="Created Apex Class LeadServiceTest",
            action_type=ActionType.CREATED,
            metadata_type="ApexClass",
        ),
        make_record("3", metadata_type="Unknown", display="Granted login access"),
    ]

    resolved = asyncio.run(resolver(records))

    assert {record.id: record.api_name for record in resolved} == {
        "1": "Project__c.Region__c",
        "2": "LeadServiceTest",
    }
    assert not any("Unknown" in soql for soql in queries)


def test_build_query_spans_group_tolerance_window() -> None:
    resolver = ToolingResolver(client=SalesforceClient(config=salesforce_config()))
    records = [make_record("1"), make_record("2", minutes=10)]

    soql = resolver.build_query(
        TOOLING_QUERY_SPECS["CustomField"], TimestampField.LAST_MODIFIED, records
    )

    assert soql == (
        "SELECT Id, CreatedDate, LastModifiedDate, DeveloperName, TableEnumOrId "
        "FROM CustomField WHERE LastModifiedDate >= 2024-05-01T11:58:00Z "
        "AND LastModifiedDate <= 2024-05-01T12:12:00Z"
    )


def test_unmatched_records_are_omitted() -> None:
    queries: list[str] = []
    client = SalesforceClient(
        config=salesforce_config(),
        client_factory=make_client_factory(_handler(queries), base_url=INSTANCE_URL),
    )
    resolver = ToolingResolver(client=client)
    # Layout queries come back empty.
    record = make_record("9", metadata_type="Layout", display="Changed page layout Account Layout")

    assert asyncio.run(resolver([record])) == []
    assert len(queries) == 1
    assert "FROM Layout" in queries[0]
