"""Deterministic resolver backed by the Tooling API.

Records are grouped by metadata type and by the timestamp column their action
type is matched against (``CreatedDate`` for created components,
``LastModifiedDate`` for updated ones). Each group issues one Tooling query
spanning its records' tolerance windows; the shared catalog matching rule then
picks at most one component per record.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from trailpack.config.resolution import DEFAULT_MATCH_TOLERANCE
from trailpack.domain.catalog import (
    CatalogEntry,
    TimestampField,
    match_catalog_entry,
    timestamp_field_for,
)
from trailpack.domain.model import MetadataType

from .schema import ToolingComponentRow
from .soql import soql_datetime, soql_string

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from datetime import timedelta

    from trailpack.domain.model import Record

    from .client import SalesforceClient

log = getLogger(__name__)

_TIMESTAMP_COLUMNS: dict[TimestampField, str] = {
    TimestampField.CREATED: "CreatedDate",
    TimestampField.LAST_MODIFIED: "LastModifiedDate",
}
_CUSTOM_OBJECT_ID_PREFIX = "01I"


def row_value(row: Mapping[str, Any], path: str) -> Any:
    """Read a possibly dotted relationship path (``EntityDefinition.QualifiedApiName``)."""

    current: Any = row
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


@dataclass(frozen=True, slots=True)
class ToolingQuerySpec:
    """How to find components of one metadata type in the Tooling API."""

    sobject: str
    fields: tuple[str, ...]
    build_name: Callable[[Mapping[str, Any]], str | None]
    where: str | None = None
    parent_field: str | None = None


def _plain(column: str) -> Callable[[Mapping[str, Any]], str | None]:
    def build(row: Mapping[str, Any]) -> str | None:
        value = row_value(row, column)
        return str(value) if value else None

    return build


def _custom_suffix(column: str) -> Callable[[Mapping[str, Any]], str | None]:
    def build(row: Mapping[str, Any]) -> str | None:
        value = row_value(row, column)
        return f"{value}__c" if value else None

    return build


def _qualified(
    parent: str,
    child: str,
    *,
    separator: str = ".",
    suffix: str = "",
) -> Callable[[Mapping[str, Any]], str | None]:
    def build(row: Mapping[str, Any]) -> str | None:
        parent_value = row_value(row, parent)
        child_value = row_value(row, child)
        if not parent_value or not child_value:
            return None
        return f"{parent_value}{separator}{child_value}{suffix}"

    return build


TOOLING_QUERY_SPECS: dict[str, ToolingQuerySpec] = {
    MetadataType.APEX_CLASS: ToolingQuerySpec(
        "ApexClass", ("Name",), _plain("Name"), where="NamespacePrefix = null"
    ),
    MetadataType.APEX_TRIGGER: ToolingQuerySpec(
        "ApexTrigger", ("Name",), _plain("Name"), where="NamespacePrefix = null"
    ),
    MetadataType.APEX_PAGE: ToolingQuerySpec(
        "ApexPage", ("Name",), _plain("Name"), where="NamespacePrefix = null"
    ),
    MetadataType.APEX_COMPONENT: ToolingQuerySpec(
        "ApexComponent", ("Name",), _plain("Name"), where="NamespacePrefix = null"
    ),
    MetadataType.AURA_DEFINITION_BUNDLE: ToolingQuerySpec(
        "AuraDefinitionBundle", ("DeveloperName",), _plain("DeveloperName")
    ),
    MetadataType.LIGHTNING_COMPONENT_BUNDLE: ToolingQuerySpec(
        "LightningComponentBundle", ("DeveloperName",), _plain("DeveloperName")
    ),
    MetadataType.CUSTOM_FIELD: ToolingQuerySpec(
        "CustomField",
        ("DeveloperName", "TableEnumOrId"),
        _qualified("TableEnumOrId", "DeveloperName", suffix="__c"),
        parent_field="TableEnumOrId",
    ),
    MetadataType.CUSTOM_OBJECT: ToolingQuerySpec(
        "CustomObject", ("DeveloperName",), _custom_suffix("DeveloperName")
    ),
    MetadataType.VALIDATION_RULE: ToolingQuerySpec(
        "ValidationRule",
        ("ValidationName", "EntityDefinition.QualifiedApiName"),
        _qualified("EntityDefinition.QualifiedApiName", "ValidationName"),
    ),
    MetadataType.FLOW: ToolingQuerySpec(
        "FlowDefinition", ("DeveloperName",), _plain("DeveloperName")
    ),
    MetadataType.LAYOUT: ToolingQuerySpec(
        "Layout",
        ("Name", "TableEnumOrId"),
        _qualified("TableEnumOrId", "Name", separator="-"),
        parent_field="TableEnumOrId",
    ),
    MetadataType.PERMISSION_SET: ToolingQuerySpec(
        "PermissionSet", ("Name",), _plain("Name"), where="IsOwnedByProfile = false"
    ),
    MetadataType.PROFILE: ToolingQuerySpec("Profile", ("Name",), _plain("Name")),
    MetadataType.WORKFLOW_RULE: ToolingQuerySpec(
        "WorkflowRule",
        ("Name", "TableEnumOrId"),
        _qualified("TableEnumOrId", "Name"),
        parent_field="TableEnumOrId",
    ),
    MetadataType.STATIC_RESOURCE: ToolingQuerySpec(
        "StaticResource", ("Name",), _plain("Name"), where="NamespacePrefix = null"
    ),
    MetadataType.EMAIL_TEMPLATE: ToolingQuerySpec(
        "EmailTemplate", ("DeveloperName",), _plain("DeveloperName")
    ),
    MetadataType.CUSTOM_LABEL: ToolingQuerySpec("ExternalString", ("Name",), _plain("Name")),
    MetadataType.CUSTOM_TAB: ToolingQuerySpec(
        "CustomTab", ("DeveloperName",), _plain("DeveloperName")
    ),
}


@dataclass(slots=True)
class ToolingResolver:
    """Exact-match resolver over the org's Tooling API.

    Only matched records are returned; unmatched ids are omitted.
    """

    client: SalesforceClient
    tolerance: timedelta = DEFAULT_MATCH_TOLERANCE
    specs: Mapping[str, ToolingQuerySpec] = field(default_factory=lambda: TOOLING_QUERY_SPECS)

    async def __call__(self, records: Sequence[Record]) -> list[Record]:
        groups: dict[tuple[str, TimestampField], list[Record]] = defaultdict(list)
        for record in records:
            if record.metadata_type not in self.specs:
                log.debug(
                    "No Tooling query for metadata type %s (record %s)",
                    record.metadata_type,
                    record.id,
                )
                continue
            groups[(record.metadata_type, timestamp_field_for(record))].append(record)

        matched: list[Record] = []
        for (metadata_type, timestamp_field), members in groups.items():
            candidates = await self.fetch_candidates(metadata_type, timestamp_field, members)
            for record in members:
                entry = match_catalog_entry(record, candidates, tolerance=self.tolerance)
                if entry is not None:
                    matched.append(replace(record, api_name=entry.full_name))

        log.info("Tooling API matched %s of %s record(s)", len(matched), len(records))
        return matched

    def build_query(
        self,
        spec: ToolingQuerySpec,
        timestamp_field: TimestampField,
        records: Sequence[Record],
    ) -> str:
        column = _TIMESTAMP_COLUMNS[timestamp_field]
        start = min(record.created_date for record in records) - self.tolerance
        end = max(record.created_date for record in records) + self.tolerance
        clauses = [
            f"{column} >= {soql_datetime(start)}",
            f"{column} <= {soql_datetime(end, round_up=True)}",
        ]
        if spec.where:
            clauses.append(spec.where)
        columns = ", ".join(("Id", "CreatedDate", "LastModifiedDate", *spec.fields))
        return f"SELECT {columns} FROM {spec.sobject} WHERE {' AND '.join(clauses)}"

    async def fetch_candidates(
        self,
        metadata_type: str,
        timestamp_field: TimestampField,
        records: Sequence[Record],
    ) -> list[CatalogEntry]:
        spec = self.specs[metadata_type]
        rows = await self.client.tooling_query(self.build_query(spec, timestamp_field, records))
        if spec.parent_field:
            rows = await self._qualify_custom_parents(rows, spec.parent_field)

        entries: list[CatalogEntry] = []
        for row in rows:
            name = spec.build_name(row)
            if not name:
                continue
            component = ToolingComponentRow.model_validate(row)
            entries.append(
                CatalogEntry(
                    metadata_type=metadata_type,
                    full_name=name,
                    created_date=component.created_date,
                    last_modified_date=component.last_modified_date,
                )
            )
        return entries

    async def _qualify_custom_parents(
        self,
        rows: list[dict[str, Any]],
        parent_field: str,
    ) -> list[dict[str, Any]]:
        """Replace custom object ids in ``parent_field`` with ``Name__c`` api names."""

        object_ids = sorted(
            {
                str(row[parent_field])
                for row in rows
                if str(row.get(parent_field) or "").startswith(_CUSTOM_OBJECT_ID_PREFIX)
            }
        )
        if not object_ids:
            return rows

        id_list = ", ".join(soql_string(object_id) for object_id in object_ids)
        objects = await self.client.tooling_query(
            f"SELECT Id, DeveloperName FROM CustomObject WHERE Id IN ({id_list})"
        )
        names = {
            str(obj["Id"]): f"{obj['DeveloperName']}__c"
            for obj in objects
            if obj.get("Id") and obj.get("DeveloperName")
        }
        # Tooling ids may come back as 18-char while TableEnumOrId holds 15-char.
        names.update({object_id[:15]: name for object_id, name in list(names.items())})
        return [
            {**row, parent_field: names.get(str(row.get(parent_field)), row.get(parent_field))}
            for row in rows
        ]
