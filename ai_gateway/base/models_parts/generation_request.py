"""
Generation request DTO.

Bundles everything the orchestrators need for one invocation: the resolved
model configuration, the ordered conversation, optional settings and an
optional thread reference that turns persistence on.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .generation_settings import GenerationSettings
from .message import ChatMessage
from .model_configuration import ModelConfiguration


@dataclass(frozen=True)
class GenerationRequest:
    """Provider-agnostic generation request.

    Attributes:
        model: Model configuration the request targets.
        messages: Ordered, non-empty conversation.
        settings: Optional sampling parameters.
        thread_id: Conversation thread to persist into; ``None`` disables
            persistence entirely.
    """

    model: ModelConfiguration
    messages: List[ChatMessage]
    settings: Optional[GenerationSettings] = None
    thread_id: Optional[str] = None

    def last_user_message(self) -> Optional[ChatMessage]:
        """Return the final message when it is a user turn, otherwise ``None``."""
        if self.messages and self.messages[-1].role == "user":
            return self.messages[-1]
        return None


__all__ = ["GenerationRequest"]
