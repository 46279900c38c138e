"""Configuration for the generative inference endpoint."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_INFERENCE_BASE_URL = "https://api.openai.com/v1"
DEFAULT_INFERENCE_MODEL = "gpt-4o-mini"
INFERENCE_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class InferenceConfig:
    """Holds chat-completions endpoint configuration values."""

    api_key: str
    model: str
    resilience: ResilienceConfig
    temperature: float = 0.0


def get_inference_config(*, resilience: ResilienceConfig | None = None) -> InferenceConfig:
    values = require_env_vars(("INFERENCE_API_KEY",))
    api_key = values["INFERENCE_API_KEY"]
    base_url = optional_env_var("INFERENCE_BASE_URL", DEFAULT_INFERENCE_BASE_URL).rstrip("/")
    model = optional_env_var("INFERENCE_MODEL", DEFAULT_INFERENCE_MODEL)

    return InferenceConfig(
        api_key=api_key,
        model=model,
        resilience=resilience
        or ResilienceConfig(
            name="inference",
            base_url=base_url,
            timeout_seconds=INFERENCE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            retry=RetryPolicy(total=2),
            cache=None,
            default_headers={"Authorization": f"Bearer {api_key}"},
        ),
    )
