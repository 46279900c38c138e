"""Public interface for the Salesforce adapter."""

from __future__ import annotations

from .audit_trail import SetupAuditTrailSource
from .client import SalesforceAPIError, SalesforceClient
from .schema import AuditTrailRow, QueryResponse, ToolingComponentRow
from .tooling import TOOLING_QUERY_SPECS, ToolingQuerySpec, ToolingResolver
from .translator import classify_action_type, classify_metadata_type, parse_audit_trail_row

__all__ = [
    "TOOLING_QUERY_SPECS",
    "AuditTrailRow",
    "QueryResponse",
    "SalesforceAPIError",
    "SalesforceClient",
    "SetupAuditTrailSource",
    "ToolingComponentRow",
    "ToolingQuerySpec",
    "ToolingResolver",
    "classify_action_type",
    "classify_metadata_type",
    "parse_audit_trail_row",
]
