"""
Pydantic DTOs and validators for inbound completion requests.

Purpose
-------
Validate inbound completion payloads at the edge (HTTP body, CLI input)
before they become internal :class:`GenerationRequest` objects. Enforces
roles, non-empty content, a non-empty conversation and the numeric bounds of
every sampling parameter.

External dependencies: Pydantic only (no network calls). No timeouts.

Fallback semantics: Not applicable. Validation either succeeds or raises a
``pydantic.ValidationError``; the HTTP layer maps it to a 4xx response.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models_parts.generation_settings import GenerationSettings
from ..models_parts.message import ChatMessage


class ChatMessageDTO(BaseModel):
    """A single inbound chat message.

    Rules:
        - ``role`` must be ``user``, ``assistant`` or ``system``.
        - ``content`` must contain at least one character.
    """

    role: Literal["user", "assistant", "system"]
    content: str = Field(..., min_length=1)

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class CompletionSettingsDTO(BaseModel):
    """Optional sampling parameters with inclusive bounds.

    Each field is independently optional. Integer fields reject floats with a
    fractional part (pydantic's lax mode still accepts ``10.0``).
    """

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=1_000_000, alias="maxTokens")
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="topP")
    top_k: Optional[int] = Field(default=None, ge=0, le=100, alias="topK")
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0, alias="frequencyPenalty")
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0, alias="presencePenalty")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_settings(self) -> GenerationSettings:
        return GenerationSettings(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            top_k=self.top_k,
            frequency_penalty=self.frequency_penalty,
            presence_penalty=self.presence_penalty,
        )


class CompletionInputDTO(BaseModel):
    """Inbound completion request.

    Parameters:
        model_id: Stored model configuration id (owned by the caller).
        messages: Ordered, non-empty conversation.
        settings: Optional sampling parameters.
        thread_id: Optional thread to persist the exchange into.

    Raises:
        ValidationError: On invalid roles, empty content, empty conversation
        or out-of-range settings.
    """

    model_config = ConfigDict(populate_by_name=True)

    model_id: str = Field(..., min_length=1, alias="modelId")
    messages: List[ChatMessageDTO] = Field(..., min_length=1)
    settings: Optional[CompletionSettingsDTO] = None
    thread_id: Optional[str] = Field(default=None, alias="chatId")

    def to_messages(self) -> List[ChatMessage]:
        return [m.to_message() for m in self.messages]


__all__ = [
    "ChatMessageDTO",
    "CompletionSettingsDTO",
    "CompletionInputDTO",
]
