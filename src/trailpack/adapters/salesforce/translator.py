"""Translate ``SetupAuditTrail`` rows into change-log records."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from trailpack.domain.model import ActionType, MetadataType, Record

from .schema import AuditTrailRow

if TYPE_CHECKING:
    from collections.abc import Mapping

_CREATED_ACTION = re.compile(r"^(created|new|add|insert)", re.IGNORECASE)

# Ordered: the first pattern found in "section action display" wins, so the more
# specific component kinds are listed before the generic field/object rules.
_METADATA_TYPE_RULES: tuple[tuple[re.Pattern[str], MetadataType], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), metadata_type)
    for pattern, metadata_type in (
        (r"validation ?rule", MetadataType.VALIDATION_RULE),
        (r"apex ?trigger|\btrigger\b", MetadataType.APEX_TRIGGER),
        (r"apex ?class", MetadataType.APEX_CLASS),
        (r"visualforce ?page|apex ?page", MetadataType.APEX_PAGE),
        (r"visualforce ?component|apex ?component", MetadataType.APEX_COMPONENT),
        (r"lightning web component", MetadataType.LIGHTNING_COMPONENT_BUNDLE),
        (r"aura|lightning component", MetadataType.AURA_DEFINITION_BUNDLE),
        (r"\bflows?\b|process builder", MetadataType.FLOW),
        (r"page ?layout|\blayout\b", MetadataType.LAYOUT),
        (r"permission ?set", MetadataType.PERMISSION_SET),
        (r"\bprofiles?\b", MetadataType.PROFILE),
        (r"record ?type", MetadataType.RECORD_TYPE),
        (r"workflow ?rule", MetadataType.WORKFLOW_RULE),
        (r"static ?resource", MetadataType.STATIC_RESOURCE),
        (r"email ?template", MetadataType.EMAIL_TEMPLATE),
        (r"custom ?label", MetadataType.CUSTOM_LABEL),
        (r"custom ?tab", MetadataType.CUSTOM_TAB),
        (r"custom ?metadata", MetadataType.CUSTOM_METADATA),
        (r"custom ?field|\bfield\b|^(created|changed|deleted)CF", MetadataType.CUSTOM_FIELD),
        (r"custom ?object", MetadataType.CUSTOM_OBJECT),
    )
)


def classify_action_type(action: str) -> ActionType:
    """``SetupAuditTrail.Action`` codes start with a verb: created*, changed*, ..."""

    if _CREATED_ACTION.match(action.strip()):
        return ActionType.CREATED
    return ActionType.UPDATED


def classify_metadata_type(*, section: str | None, action: str, display: str | None) -> str:
    for haystack in (action, f"{section or ''} {display or ''}"):
        for pattern, metadata_type in _METADATA_TYPE_RULES:
            if pattern.search(haystack):
                return metadata_type.value
    return MetadataType.UNKNOWN.value


def parse_audit_trail_row(payload: Mapping[str, Any] | AuditTrailRow) -> Record:
    row = (
        payload if isinstance(payload, AuditTrailRow) else AuditTrailRow.model_validate(payload)
    )
    return Record(
        id=row.id,
        created_date=row.created_date,
        created_by=row.created_by.name if row.created_by else None,
        section=row.section or "",
        action=row.action,
        display=row.display or "",
        metadata_type=classify_metadata_type(
            section=row.section, action=row.action, display=row.display
        ),
        action_type=classify_action_type(row.action),
    )
