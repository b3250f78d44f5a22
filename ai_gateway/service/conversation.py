"""Conversation bookkeeping shared by both orchestrators.

Holds the duplicate-guarded user append and the assistant metadata shapes
persisted alongside generated text.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models import TokenUsage
from ..persistence.interfaces.repos import ConversationStore

FAILED_FINISH_REASON = "error"


async def append_user_turn_if_new(store: ConversationStore, thread_id: str, content: str) -> Optional[str]:
    """Append a user message unless it repeats the thread's latest user message.

    Returns the new message id, or ``None`` when the append was skipped.
    """
    latest = await store.latest_message(thread_id, "user")
    if latest is not None and latest.matches("user", content):
        return None
    return await store.append_message(thread_id, "user", content)


def assistant_metadata(model: str, usage: Optional[TokenUsage], finish_reason: Optional[str]) -> Dict[str, Any]:
    """Metadata stored with a completed assistant message."""
    meta: Dict[str, Any] = {
        "model": model,
        "tokens": usage.total_tokens if usage else None,
    }
    if finish_reason is not None:
        meta["finishReason"] = finish_reason
    return meta


def failed_metadata() -> Dict[str, Any]:
    """Metadata stored with partial text after a mid-stream failure."""
    return {"model": "", "tokens": None, "finishReason": FAILED_FINISH_REASON}


__all__ = ["append_user_turn_if_new", "assistant_metadata", "failed_metadata", "FAILED_FINISH_REASON"]
