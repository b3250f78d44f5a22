"""Completion orchestrator (non-streaming).

Calls the provider handle exactly once. When the request names a thread and a
store is configured, the exchange is persisted afterwards as best-effort
bookkeeping: a thread that is missing or owned by someone else is skipped
silently, and the generated text is returned either way.

Provider exceptions are classified and re-raised as
:class:`ClassifiedProviderError` with the original exception chained. There
is no retry.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..base.errors import ClassifiedProviderError, classify
from ..base.interfaces import ModelHandle
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import GenerationRequest, GenerationResult
from ..persistence.interfaces.repos import ConversationStore
from .conversation import append_user_turn_if_new, assistant_metadata


class CompletionOrchestrator:
    """Drive one non-streaming generation with optional persistence.

    Args:
        store: Conversation store; ``None`` disables persistence.
    """

    def __init__(self, store: Optional[ConversationStore] = None) -> None:
        self._store = store
        self._logger = get_logger("gateway.completion")

    async def complete(
        self, request: GenerationRequest, owner_id: str, handle: ModelHandle
    ) -> GenerationResult:
        ctx = LogContext(
            provider=handle.provider.value,
            model=handle.model_id,
            thread_id=request.thread_id,
            owner_id=owner_id,
        )
        normalized_log_event(self._logger, "complete.start", ctx, phase="start", messages=len(request.messages))
        t0 = time.perf_counter()
        try:
            result = await handle.generate_text(request.messages, request.settings)
        except Exception as exc:
            classified = classify(exc)
            normalized_log_event(
                self._logger,
                "complete.error",
                ctx,
                phase="finalize",
                error_code=classified.kind.value,
                emitted=False,
                level=logging.WARNING,
                error=classified.message,
            )
            raise ClassifiedProviderError.from_classified(classified) from exc

        if request.thread_id and self._store is not None:
            await self._persist(self._store, request.thread_id, request, owner_id, handle.model_id, result)

        normalized_log_event(
            self._logger,
            "complete.end",
            ctx,
            phase="finalize",
            emitted=bool(result.text),
            tokens=result.usage,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        return result

    async def _persist(
        self,
        store: ConversationStore,
        thread_id: str,
        request: GenerationRequest,
        owner_id: str,
        model_id: str,
        result: GenerationResult,
    ) -> None:
        if not await store.verify_thread_ownership(thread_id, owner_id):
            return
        last_user = request.last_user_message()
        if last_user is not None:
            await append_user_turn_if_new(store, thread_id, last_user.content)
        await store.append_message(
            thread_id,
            "assistant",
            result.text,
            assistant_metadata(model_id, result.usage, result.finish_reason),
        )
        await store.touch_thread(thread_id)


__all__ = ["CompletionOrchestrator"]
