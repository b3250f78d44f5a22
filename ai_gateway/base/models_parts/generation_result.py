"""
Generation result DTO.

The ``raw_response`` field holds the provider SDK object for diagnostics and is
excluded from serialization so large object graphs are never logged or sent
to clients by accident.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .token_usage import TokenUsage


@dataclass
class GenerationResult:
    """Outcome of a non-streaming generation.

    Attributes:
        text: Generated text (may be empty).
        usage: Token accounting, when reported.
        finish_reason: Provider finish reason normalized to lowercase.
        raw_response: Provider SDK object for diagnostics only.
    """

    text: str
    usage: Optional[TokenUsage] = None
    finish_reason: Optional[str] = None
    raw_response: Optional[Any] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary excluding the raw response."""
        return {
            "text": self.text,
            "usage": self.usage.to_dict() if self.usage else None,
            "finishReason": self.finish_reason,
        }


__all__ = ["GenerationResult"]
