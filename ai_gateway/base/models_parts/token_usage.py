"""
Token usage DTO.

Normalized token accounting extracted from provider responses. Any field may
be ``None`` when the provider does not report it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class TokenUsage:
    """Prompt, completion and total token counts."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        """Return the camelCase wire shape."""
        return {
            "promptTokens": self.prompt_tokens,
            "completionTokens": self.completion_tokens,
            "totalTokens": self.total_tokens,
        }


__all__ = ["TokenUsage"]
