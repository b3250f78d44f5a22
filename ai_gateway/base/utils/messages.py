"""Message and settings shaping helpers shared across provider handles.

Helpers here are side-effect free apart from debug logging and operate on the
provider-agnostic DTOs only.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..log_support import LogContext
from ..logging import log_event
from ..models import ChatMessage, GenerationSettings


def split_system(messages: Sequence[ChatMessage]) -> Tuple[Optional[str], List[ChatMessage]]:
    """Separate system turns from the conversation.

    Returns ``(system_text, rest)`` where ``system_text`` joins every system
    message with a blank line (``None`` when there are none) and ``rest``
    keeps the remaining turns in order.
    """
    system_parts = [m.content for m in messages if m.role == "system" and m.content]
    rest = [m for m in messages if m.role != "system"]
    return ("\n\n".join(system_parts) if system_parts else None), rest


def map_settings(
    settings: Optional[GenerationSettings],
    mapping: Mapping[str, str],
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext] = None,
) -> Dict[str, Any]:
    """Translate set generation settings into SDK keyword arguments.

    ``mapping`` maps :class:`GenerationSettings` field names to the SDK's
    parameter names. Set fields missing from ``mapping`` are dropped and
    reported with a single ``settings.dropped`` debug event.
    """
    if settings is None:
        return {}
    out: Dict[str, Any] = {}
    dropped: List[str] = []
    for name, value in settings.to_dict().items():
        target = mapping.get(name)
        if target is None:
            dropped.append(name)
            continue
        out[target] = value
    if dropped:
        log_event(logger, "settings.dropped", ctx, level=logging.DEBUG, dropped=sorted(dropped))
    return out


def normalize_finish_reason(value: Any) -> Optional[str]:
    """Return a lowercase finish reason string (enum members use their name)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.lower() or None
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name.lower()
    return str(value).lower()


__all__ = ["split_system", "map_settings", "normalize_finish_reason"]
