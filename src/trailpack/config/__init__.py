"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, optional_int_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .inference import InferenceConfig, get_inference_config
from .logging import configure_logging
from .resolution import ResolutionConfig, get_resolution_config
from .salesforce import SalesforceConfig, get_salesforce_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "InferenceConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResolutionConfig",
    "RetryPolicy",
    "SalesforceConfig",
    "StorageConfig",
    "configure_logging",
    "get_inference_config",
    "get_resolution_config",
    "get_salesforce_config",
    "get_storage_config",
    "optional_env_var",
    "optional_int_env_var",
    "require_env_var",
    "require_env_vars",
]
