"""Public interface for the generative inference adapter."""

from __future__ import annotations

from .client import InferenceAPIError, InferenceResolver, parse_inferred_names
from .schema import ChatCompletionResponse

__all__ = [
    "ChatCompletionResponse",
    "InferenceAPIError",
    "InferenceResolver",
    "parse_inferred_names",
]
