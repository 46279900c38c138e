"""Pydantic models describing Salesforce REST and Tooling API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SalesforceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class QueryResponse(SalesforceBaseModel):
    total_size: int = Field(alias="totalSize")
    done: bool
    records: list[dict[str, Any]] = Field(default_factory=list)
    next_records_url: str | None = Field(default=None, alias="nextRecordsUrl")


class ApiErrorItem(SalesforceBaseModel):
    message: str
    error_code: str | None = Field(default=None, alias="errorCode")


class UserReference(SalesforceBaseModel):
    name: str | None = Field(default=None, alias="Name")


class AuditTrailRow(SalesforceBaseModel):
    """One ``SetupAuditTrail`` row."""

    id: str = Field(alias="Id")
    created_date: datetime = Field(alias="CreatedDate")
    created_by: UserReference | None = Field(default=None, alias="CreatedBy")
    section: str | None = Field(default=None, alias="Section")
    action: str = Field(alias="Action")
    display: str | None = Field(default=None, alias="Display")

    _normalize_section = field_validator("section", "display", mode="before")(_blank_to_none)


class ToolingComponentRow(SalesforceBaseModel):
    """Timestamp columns every Tooling component query selects.

    The name columns differ per sObject and are read from the raw row.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="Id")
    created_date: datetime = Field(alias="CreatedDate")
    last_modified_date: datetime = Field(alias="LastModifiedDate")
