from __future__ import annotations

from datetime import UTC, datetime

import pytest

from trailpack.adapters.salesforce import (
    classify_action_type,
    classify_metadata_type,
    parse_audit_trail_row,
)
from trailpack.domain.model import ActionType


@pytest.mark.parametrize(
    ("action", "expected"),
    [
        ("createdApexClass", ActionType.CREATED),
        ("newCustomObject", ActionType.CREATED),
        ("changedCF", ActionType.UPDATED),
        ("deletedLayout", ActionType.UPDATED),
    ],
)
def test_classify_action_type(action: str, expected: ActionType) -> None:
    assert classify_action_type(action) is expected


@pytest.mark.parametrize(
    ("section", "action", "display", "expected"),
    [
        ("Apex Class", "createdApexClass", "Created Apex Class LeadService", "ApexClass"),
        ("Customize Accounts", "changedCF", "Changed Region custom field", "CustomField"),
        ("Customize Accounts", "changedValidationRule", "Changed rule", "ValidationRule"),
        ("Manage Users", "PermSetAssign", "Assigned permission set Sales_Ops", "PermissionSet"),
        ("Manage Users", "loginasgrantedtoaccount", "Granted login access", "Unknown"),
    ],
)
def test_classify_metadata_type(section: str, action: str, display: str, expected: str) -> None:
    assert classify_metadata_type(section=section, action=action, display=display) == expected


def test_parse_audit_trail_row_builds_record() -> None:
    record = parse_audit_trail_row(
        {
            "attributes": {"type": "SetupAuditTrail"},
            "Id": "0Ym5g00000ABCDE",
            "CreatedDate": "2024-05-01T12:00:00.000Z",
            "CreatedBy": {"attributes": {"type": "User"}, "Name": "Ada Admin"},
            "Section": "Apex Class",
            "Action": "createdApexClass",
            "Display": "Created Apex Class LeadService",
        }
    )

    assert record.id == "0Ym5g00000ABCDE"
    assert record.created_date == datetime(2024, 5, 1, 12, tzinfo=UTC)
    assert record.created_by == "Ada Admin"
    assert record.metadata_type == "ApexClass"
    assert record.action_type is ActionType.CREATED
    assert not record.is_resolved


def test_parse_audit_trail_row_tolerates_blank_section() -> None:
    record = parse_audit_trail_row(
        {
            "Id": "0Ym5g00000ABCDF",
            "CreatedDate": "2024-05-01T12:00:00.000Z",
            "CreatedBy": None,
            "Section": "  ",
            "Action": "loginasgrantedtoaccount",
            "Display": None,
        }
    )

    assert record.section == ""
    assert record.display == ""
    assert record.created_by is None
    assert record.metadata_type == "Unknown"
