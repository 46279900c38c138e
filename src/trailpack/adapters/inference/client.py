"""Generative resolver backed by a chat-completions endpoint."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from trailpack.adapters.http_resilience import ClientFactory, ResilientClient

from .schema import ChatCompletionResponse, ErrorResponse, InferredNames

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailpack.config.http_resilience import ResilienceConfig
    from trailpack.config.inference import InferenceConfig

log = getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a Salesforce metadata expert. Each input line is a Setup Audit Trail "
    "entry written as 'Section: <section> | Display: <display text>'. For every entry "
    "infer the API name of the changed component exactly as it would appear in a "
    "package.xml <members> element (fields as Object__c.Field__c, layouts as "
    "Object-Layout Name). Reply with a single JSON object whose keys are the entries "
    "copied verbatim and whose values are the API names, or null when you cannot tell."
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class InferenceAPIError(RuntimeError):
    """Raised when the inference endpoint fails or answers with an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class InferenceResolver:
    """Infer api names for description strings in one batched completion."""

    config: InferenceConfig
    client_factory: ClientFactory = field(default=_default_client_factory)

    async def __call__(self, descriptions: Sequence[str]) -> dict[str, str]:
        wanted = list(dict.fromkeys(descriptions))
        if not wanted:
            return {}

        async with self.client_factory(self.config.resilience) as client:
            response = await client.post("/chat/completions", json=self.build_payload(wanted))

        if response.is_error:
            raise _api_error(response.status_code, response.text)

        try:
            completion = ChatCompletionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise InferenceAPIError(
                "Unexpected chat completion payload", status_code=response.status_code
            ) from exc
        if not completion.choices or not completion.choices[0].message.content:
            raise InferenceAPIError("Chat completion returned no content")

        inferred = parse_inferred_names(completion.choices[0].message.content)
        requested = set(wanted)
        result = {key: value for key, value in inferred.items() if key in requested}
        log.info("Inference answered %s of %s description(s)", len(result), len(wanted))
        return result

    def build_payload(self, descriptions: Sequence[str]) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "temperature": self.config.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": "\n".join(descriptions)},
            ],
        }


def parse_inferred_names(content: str) -> dict[str, str]:
    """Parse the model's JSON object, dropping nulls and blank names."""

    stripped = _CODE_FENCE.sub("", content.strip())
    try:
        raw = InferredNames.validate_python(json.loads(stripped))
    except (ValueError, ValidationError) as exc:
        raise InferenceAPIError("Inference reply is not a JSON object of names") from exc
    return {
        key: value.strip()
        for key, value in raw.items()
        if value is not None and value.strip()
    }


def _api_error(status_code: int, body: str) -> InferenceAPIError:
    try:
        detail: str | None = ErrorResponse.model_validate_json(body).error.message
    except ValidationError:
        detail = None
    message = detail or f"Inference request failed with HTTP {status_code}"
    log.error(f"Inference API error {status_code}: {message}")
    return InferenceAPIError(message, status_code=status_code)
