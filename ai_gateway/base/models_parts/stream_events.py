"""
Streaming event DTOs.

A stream emits zero or more ``TextDeltaEvent`` followed by exactly one
terminal event, either ``FinishEvent`` or ``ErrorEvent``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Union

from ..errors_parts.classified_error import ClassifiedError
from .token_usage import TokenUsage


@dataclass(frozen=True)
class TextDeltaEvent:
    """Incremental text produced by the provider."""

    text: str
    type: Literal["text-delta"] = field(default="text-delta", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class FinishEvent:
    """Terminal success event."""

    finish_reason: Optional[str] = None
    usage: Optional[TokenUsage] = None
    type: Literal["finish"] = field(default="finish", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "finishReason": self.finish_reason,
            "usage": self.usage.to_dict() if self.usage else None,
        }


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal failure event carrying the classified error."""

    error: ClassifiedError
    type: Literal["error"] = field(default="error", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "error": self.error.to_dict()}


StreamEvent = Union[TextDeltaEvent, FinishEvent, ErrorEvent]


__all__ = ["TextDeltaEvent", "FinishEvent", "ErrorEvent", "StreamEvent"]
