"""Token usage extraction helpers.

This module centralizes *best-effort* extraction of token accounting from raw
provider SDK objects (responses or final stream chunks) into the canonical
:class:`TokenUsage` DTO.

Design Principles
-----------------
1. Non-Intrusive: objects without usage attributes yield an all-``None``
   ``TokenUsage`` rather than raising.
2. Coercion: values are coerced via ``int``; invalid or negative
   values downgrade to ``None``.
3. Derived Total: when ``total`` is missing but both components are present
   the total is their sum. With only one component the total stays ``None``.

Supported Shapes
----------------
OpenAI-compatible:
    ``usage.prompt_tokens`` / ``usage.completion_tokens`` / ``usage.total_tokens``
Anthropic:
    ``usage.input_tokens`` / ``usage.output_tokens``
Gemini:
    ``usage_metadata.prompt_token_count`` / ``candidates_token_count`` /
    ``total_token_count``

Mappings (``dict``) and attribute objects are both accepted. All functions
always succeed and are free of logging.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import TokenUsage


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce arbitrary value to a non-negative ``int`` or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def finalize_usage(prompt: Any, completion: Any, total: Any = None) -> TokenUsage:
    """Build a ``TokenUsage`` deriving a missing total when both parts exist."""
    p, c, t = _coerce_int(prompt), _coerce_int(completion), _coerce_int(total)
    if t is None and p is not None and c is not None:
        t = p + c
    return TokenUsage(prompt_tokens=p, completion_tokens=c, total_tokens=t)


def extract_openai_token_usage(raw: Any) -> TokenUsage:
    """Extract usage from an OpenAI-compatible response or final chunk."""
    usage = _field(raw, "usage")
    return finalize_usage(
        _field(usage, "prompt_tokens"),
        _field(usage, "completion_tokens"),
        _field(usage, "total_tokens"),
    )


def extract_anthropic_token_usage(raw: Any) -> TokenUsage:
    """Extract usage from an Anthropic ``Message`` (or a bare usage object)."""
    usage = _field(raw, "usage")
    if usage is None:
        usage = raw
    return finalize_usage(_field(usage, "input_tokens"), _field(usage, "output_tokens"))


def extract_gemini_token_usage(raw: Any) -> TokenUsage:
    """Extract usage from a google-generativeai response or stream chunk."""
    meta = _field(raw, "usage_metadata")
    return finalize_usage(
        _field(meta, "prompt_token_count"),
        _field(meta, "candidates_token_count"),
        _field(meta, "total_token_count"),
    )


__all__ = [
    "finalize_usage",
    "extract_openai_token_usage",
    "extract_anthropic_token_usage",
    "extract_gemini_token_usage",
]
