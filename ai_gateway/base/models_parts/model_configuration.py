"""
Model configuration DTO.

A `ModelConfiguration` is the stored, user-owned description of how to reach
one upstream model: which provider family, which upstream model id, which
credential record and an optional base URL override.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .provider_tag import ProviderTag


@dataclass(frozen=True)
class ModelConfiguration:
    """Provider-agnostic model configuration.

    Attributes:
        provider: Provider family tag.
        model_id: Upstream model identifier (e.g. ``"gpt-4o-mini"``).
        credential_id: Reference to a stored credential record; required for
            every provider except ``ollama``.
        base_url: Optional endpoint override; normalized by the registry.
        name: Display name used in user-facing configuration errors.
        id: Record id of the stored configuration, when persisted.
    """

    provider: ProviderTag
    model_id: str
    credential_id: Optional[str] = None
    base_url: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.model_id


__all__ = ["ModelConfiguration"]
