"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ActionType(StrEnum):
    CREATED = "Created"
    UPDATED = "Updated"


class RecordFilter(StrEnum):
    """Display filters offered over the master set."""

    ALL = "All"
    CREATED = "Created"
    UPDATED = "Updated"

    def admits(self, action_type: ActionType) -> bool:
        if self is RecordFilter.ALL:
            return True
        return self.value == action_type.value


class MetadataType(StrEnum):
    """Metadata types the ingestion classifier knows how to recognise."""

    APEX_CLASS = "ApexClass"
    APEX_COMPONENT = "ApexComponent"
    APEX_PAGE = "ApexPage"
    APEX_TRIGGER = "ApexTrigger"
    AURA_DEFINITION_BUNDLE = "AuraDefinitionBundle"
    CUSTOM_FIELD = "CustomField"
    CUSTOM_LABEL = "CustomLabel"
    CUSTOM_METADATA = "CustomMetadata"
    CUSTOM_OBJECT = "CustomObject"
    CUSTOM_TAB = "CustomTab"
    EMAIL_TEMPLATE = "EmailTemplate"
    FLOW = "Flow"
    LAYOUT = "Layout"
    LIGHTNING_COMPONENT_BUNDLE = "LightningComponentBundle"
    PERMISSION_SET = "PermissionSet"
    PROFILE = "Profile"
    RECORD_TYPE = "RecordType"
    STATIC_RESOURCE = "StaticResource"
    VALIDATION_RULE = "ValidationRule"
    WORKFLOW_RULE = "WorkflowRule"
    UNKNOWN = "Unknown"


UNKNOWN_METADATA_TYPE = MetadataType.UNKNOWN.value
