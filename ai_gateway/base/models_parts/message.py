"""
Chat message DTO used across the gateway.

Defines the `ChatMessage` dataclass and the `Role` literal representing the
sender role. Content is always plain, non-empty text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal


# Message roles accepted by every provider family.
Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A single conversation turn.

    Attributes:
        role: The role of the message author (``"system"``, ``"user"`` or
            ``"assistant"``).
        content: Message text.
    """

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


__all__ = [
    "ChatMessage",
    "Role",
]
