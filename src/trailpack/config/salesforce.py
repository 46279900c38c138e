"""Salesforce org connection values.

The access token is taken as-is from the environment; obtaining or refreshing
it is the caller's concern.
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SALESFORCE_API_VERSION = "60.0"
SALESFORCE_TIMEOUT_SECONDS = 30.0
# Tooling queries are repeated when a resolve is re-run; a short TTL keeps the
# catalog view fresh while avoiding duplicate round trips inside one run.
TOOLING_CACHE_TTL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class SalesforceConfig:
    """Holds Salesforce REST/Tooling API configuration values."""

    instance_url: str
    access_token: str
    api_version: str
    resilience: ResilienceConfig

    @property
    def data_path(self) -> str:
        return f"/services/data/v{self.api_version}"


def get_salesforce_config(*, resilience: ResilienceConfig | None = None) -> SalesforceConfig:
    values = require_env_vars(("SALESFORCE_INSTANCE_URL", "SALESFORCE_ACCESS_TOKEN"))
    instance_url = values["SALESFORCE_INSTANCE_URL"].rstrip("/")
    access_token = values["SALESFORCE_ACCESS_TOKEN"]
    api_version = optional_env_var("SALESFORCE_API_VERSION", DEFAULT_SALESFORCE_API_VERSION)

    return SalesforceConfig(
        instance_url=instance_url,
        access_token=access_token,
        api_version=api_version,
        resilience=resilience
        or ResilienceConfig(
            name="salesforce",
            base_url=instance_url,
            timeout_seconds=SALESFORCE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            retry=RetryPolicy(total=3),
            cache=CacheConfig(backend="memory", default_ttl_seconds=TOOLING_CACHE_TTL_SECONDS),
            default_headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        ),
    )
