"""
Provider tag enumeration.

The set of provider families is closed: every value here must have a handle
constructor registered in :mod:`ai_gateway.base.factory`, which checks this at
import time.
"""
from __future__ import annotations

from enum import Enum


class ProviderTag(str, Enum):
    """Supported provider families."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"
    OLLAMA = "ollama"
    OPENROUTER = "openrouter"
    CUSTOM = "custom"

    @property
    def requires_credential(self) -> bool:
        """Whether a stored credential is mandatory (only local daemons are exempt)."""
        return self is not ProviderTag.OLLAMA


__all__ = ["ProviderTag"]
