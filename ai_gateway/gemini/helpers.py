"""Gemini helpers: request shaping and response text extraction that tolerates blocked candidates."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.models import ChatMessage

SETTINGS_MAP: Dict[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_output_tokens",
    "top_p": "top_p",
    "top_k": "top_k",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
}

_ROLE_MAP = {"user": "user", "assistant": "model"}


def to_contents(messages: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
    """Map non-system turns to Gemini ``contents`` (assistant becomes ``model``)."""
    return [
        {"role": _ROLE_MAP[m.role], "parts": [m.content]}
        for m in messages
        if m.role in _ROLE_MAP
    ]


def extract_text(response: Any) -> str:
    """Join text parts of the first candidate.

    ``response.text`` raises ``ValueError`` when a candidate has no parts
    (e.g. blocked by safety settings); reading the parts directly does not.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(p, "text", "") or "" for p in parts)


def first_finish_reason(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    # FINISH_REASON_UNSPECIFIED (0) is reported on intermediate chunks
    if reason in (None, 0):
        return None
    return reason


__all__ = ["SETTINGS_MAP", "to_contents", "extract_text", "first_finish_reason"]
