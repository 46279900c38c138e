"""Resolution and manifest defaults, overridable through ``TRAILPACK_*`` variables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import optional_env_var, optional_int_env_var

DEFAULT_MATCH_TOLERANCE = timedelta(minutes=2)
DEFAULT_MANIFEST_API_VERSION = "60.0"
DEFAULT_AUDIT_LOOKBACK_DAYS = 7
DEFAULT_AUDIT_ROW_LIMIT = 500


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    match_tolerance: timedelta = DEFAULT_MATCH_TOLERANCE
    manifest_api_version: str = DEFAULT_MANIFEST_API_VERSION
    audit_lookback_days: int = DEFAULT_AUDIT_LOOKBACK_DAYS
    audit_row_limit: int = DEFAULT_AUDIT_ROW_LIMIT


def get_resolution_config() -> ResolutionConfig:
    tolerance_seconds = optional_int_env_var(
        "TRAILPACK_MATCH_TOLERANCE_SECONDS",
        int(DEFAULT_MATCH_TOLERANCE.total_seconds()),
    )
    return ResolutionConfig(
        match_tolerance=timedelta(seconds=tolerance_seconds),
        manifest_api_version=optional_env_var(
            "TRAILPACK_MANIFEST_API_VERSION", DEFAULT_MANIFEST_API_VERSION
        ),
        audit_lookback_days=optional_int_env_var(
            "TRAILPACK_AUDIT_LOOKBACK_DAYS", DEFAULT_AUDIT_LOOKBACK_DAYS
        ),
        audit_row_limit=optional_int_env_var(
            "TRAILPACK_AUDIT_ROW_LIMIT", DEFAULT_AUDIT_ROW_LIMIT, minimum=1
        ),
    )
