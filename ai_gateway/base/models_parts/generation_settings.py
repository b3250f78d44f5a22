"""
Generation settings DTO.

Carries the optional sampling parameters forwarded to provider handles. Bounds
are enforced at the inbound edge by
:class:`ai_gateway.base.dto.completion.CompletionSettingsDTO`; this dataclass is
the already-validated internal shape.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GenerationSettings:
    """Optional sampling parameters; ``None`` means provider default."""

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return only the explicitly set parameters."""
        return {k: v for k, v in asdict(self).items() if v is not None}


__all__ = ["GenerationSettings"]
