"""Anthropic helpers module.

Purpose:
- Provide side-effect-free utilities for the Anthropic handle (request
  parameter building and response text extraction) to keep ``client.py``
  lean.

Notes:
- The Messages API takes system text as a top-level ``system`` parameter and
  requires ``max_tokens``; ``ANTHROPIC_DEFAULT_MAX_TOKENS`` is used when the
  caller does not set one.
- Frequency and presence penalties have no Anthropic counterpart and are
  dropped with a debug event.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..base.log_support import LogContext
from ..base.models import ChatMessage, GenerationSettings
from ..base.utils.messages import map_settings, split_system
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS

SETTINGS_MAP: Dict[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "top_p",
    "top_k": "top_k",
}


def build_params(
    model: str,
    messages: Sequence[ChatMessage],
    settings: Optional[GenerationSettings],
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext] = None,
) -> Dict[str, Any]:
    """Build keyword arguments for ``messages.create`` / ``messages.stream``.

    Parameters:
        model: Target model name.
        messages: Ordered conversation; system turns are lifted out.
        settings: Optional sampling settings.
        logger: Logger used to report dropped settings.
        ctx: Optional logging context.

    Returns:
        Mapping ready to splat into the SDK call.
    """
    system_text, turns = split_system(messages)
    params: Dict[str, Any] = {
        "model": model,
        "messages": [m.to_dict() for m in turns],
    }
    if system_text:
        params["system"] = system_text
    params.update(map_settings(settings, SETTINGS_MAP, logger=logger, ctx=ctx))
    params.setdefault("max_tokens", ANTHROPIC_DEFAULT_MAX_TOKENS)
    return params


def extract_text(message: Any) -> str:
    """Concatenate the ``text`` blocks of an Anthropic ``Message``."""
    parts = []
    for block in getattr(message, "content", None) or []:
        if getattr(block, "type", None) == "text":
            text = getattr(block, "text", None)
            if text:
                parts.append(text)
    return "".join(parts)


__all__ = ["SETTINGS_MAP", "build_params", "extract_text"]
