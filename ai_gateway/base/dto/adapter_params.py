"""Typed parameter object for provider handle construction.

Purpose
-------
Capture the resolved inputs every handle constructor needs (upstream model id,
plaintext credential, normalized base URL, request timeout) in one validated
object produced by the provider registry.

External dependencies
---------------------
- Pydantic v2 ``BaseModel``. The credential is held as ``SecretStr`` so that
  ``repr()``, ``model_dump()`` and log payloads never show the plaintext.

Failure modes & side effects
----------------------------
- Pure data container: no I/O side effects. Validation errors may be raised by
  Pydantic if inputs are of incorrect types.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from ..models_parts.provider_tag import ProviderTag


class AdapterParams(BaseModel):
    """Resolved handle construction parameters.

    Attributes
    ----------
    provider:
        Provider family tag.
    model_id:
        Upstream model identifier.
    api_key:
        Plaintext credential wrapped in ``SecretStr``. Call
        ``get_secret_value()`` only at the SDK boundary.
    base_url:
        Normalized endpoint, or ``None`` to use the SDK default.
    timeout_seconds:
        Request timeout handed to the SDK client.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderTag
    model_id: str = Field(..., min_length=1)
    api_key: SecretStr
    base_url: Optional[str] = None
    timeout_seconds: float = Field(default=30.0, gt=0)


__all__ = ["AdapterParams"]
