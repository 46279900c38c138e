"""Pydantic models for OpenAI-compatible chat-completion payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class InferenceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChatMessage(InferenceBaseModel):
    role: str
    content: str | None = None


class ChatChoice(InferenceBaseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatCompletionResponse(InferenceBaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[ChatChoice] = Field(default_factory=list)


class ErrorDetail(InferenceBaseModel):
    message: str
    type: str | None = None
    code: str | None = None


class ErrorResponse(InferenceBaseModel):
    error: ErrorDetail


InferredNames = TypeAdapter(dict[str, str | None])
