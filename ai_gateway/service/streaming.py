"""Streaming orchestrator.

Bridges a provider :class:`TextStream` onto the conversation store using the
:class:`StreamState` machine from :mod:`ai_gateway.base.streaming`::

    INIT -> PLACEHOLDER_CREATED (thread owned) -> STREAMING
         -> FINISHED | FAILED_PARTIAL | FAILED_EMPTY

Event contract
--------------
``stream`` is an async generator of :data:`StreamEvent`. It yields zero or
more ``TextDeltaEvent`` (one per provider chunk, unbuffered) followed by
exactly one terminal ``FinishEvent`` or ``ErrorEvent``. Failures are delivered
in-band and never raised.

Compensation
------------
- FAILED_PARTIAL: the placeholder keeps the partial text with
  ``{"model": "", "tokens": None, "finishReason": "error"}`` and the thread
  is touched.
- FAILED_EMPTY: the placeholder is deleted. A failing delete is logged and
  swallowed so it cannot mask the original error.

Cancellation
------------
If the consumer stops early (``aclose()``) or the task is cancelled, the same
compensation runs, no terminal event is emitted and the cancellation
propagates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from ..base.errors import classify
from ..base.interfaces import ModelHandle
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import (
    ErrorEvent,
    FinishEvent,
    GenerationRequest,
    StreamEvent,
    TextDeltaEvent,
)
from ..base.streaming import StreamPhase, StreamState
from ..persistence.interfaces.repos import ConversationStore, TransactionalConversationStore
from .conversation import append_user_turn_if_new, assistant_metadata, failed_metadata


async def _aclose_quietly(iterator: Any) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:  # noqa: BLE001 - closing an abandoned provider stream
        return


class StreamingOrchestrator:
    """Drive one streaming generation with placeholder bookkeeping.

    Args:
        store: Conversation store; ``None`` disables persistence.
    """

    def __init__(self, store: Optional[ConversationStore] = None) -> None:
        self._store = store
        self._logger = get_logger("gateway.streaming")

    async def stream(
        self, request: GenerationRequest, owner_id: str, handle: ModelHandle
    ) -> AsyncIterator[StreamEvent]:
        state = StreamState()
        ctx = LogContext(
            provider=handle.provider.value,
            model=handle.model_id,
            thread_id=request.thread_id,
            owner_id=owner_id,
        )
        normalized_log_event(self._logger, "stream.start", ctx, phase="start")
        chunks: Any = None
        try:
            if request.thread_id and self._store is not None:
                placeholder_id = await self._prepare_placeholder(
                    self._store, request.thread_id, request, owner_id
                )
                if placeholder_id is not None:
                    state.placeholder_created(placeholder_id)
                    normalized_log_event(
                        self._logger,
                        "stream.placeholder.created",
                        ctx,
                        phase="start",
                        message_id=placeholder_id,
                    )

            text_stream = await handle.stream_text(request.messages, request.settings)
            state.transition(StreamPhase.STREAMING)
            chunks = aiter(text_stream)
            async for chunk in chunks:
                state.append(chunk)
                yield TextDeltaEvent(text=chunk)

            usage = await text_stream.usage()
            finish_reason = await text_stream.finish_reason()
            if state.placeholder_id is not None and self._store is not None and request.thread_id:
                await self._store.update_message(
                    state.placeholder_id,
                    state.text,
                    assistant_metadata(handle.model_id, usage, finish_reason),
                )
                await self._store.touch_thread(request.thread_id)
            state.transition(StreamPhase.FINISHED)
        except (asyncio.CancelledError, GeneratorExit):
            await _aclose_quietly(chunks)
            phase = await self._compensate(state, request.thread_id, ctx)
            normalized_log_event(
                self._logger,
                "stream.cancelled",
                ctx,
                phase="finalize",
                emitted=state.has_text,
                level=logging.WARNING,
                outcome=phase.value,
            )
            raise
        except Exception as exc:
            classified = classify(exc)
            phase = await self._compensate(state, request.thread_id, ctx)
            normalized_log_event(
                self._logger,
                f"stream.{phase.value}",
                ctx,
                phase="finalize",
                error_code=classified.kind.value,
                emitted=state.has_text,
                level=logging.WARNING,
                error=classified.message,
            )
            yield ErrorEvent(error=classified)
            return

        normalized_log_event(
            self._logger,
            "stream.finish",
            ctx,
            phase="finalize",
            emitted=state.has_text,
            tokens=usage,
            finish_reason=finish_reason,
        )
        yield FinishEvent(finish_reason=finish_reason, usage=usage)

    async def _prepare_placeholder(
        self, store: ConversationStore, thread_id: str, request: GenerationRequest, owner_id: str
    ) -> Optional[str]:
        last_user = request.last_user_message()
        user_content = last_user.content if last_user is not None else None
        if isinstance(store, TransactionalConversationStore):
            return await store.prepare_placeholder(thread_id, owner_id, user_content)
        if not await store.verify_thread_ownership(thread_id, owner_id):
            return None
        if user_content:
            await append_user_turn_if_new(store, thread_id, user_content)
        return await store.append_message(thread_id, "assistant", "")

    async def _compensate(
        self, state: StreamState, thread_id: Optional[str], ctx: LogContext
    ) -> StreamPhase:
        """Move ``state`` to its failure phase and repair the placeholder row."""
        target = state.failure_phase()
        state.transition(target)
        store = self._store
        if state.placeholder_id is None or store is None or thread_id is None:
            return target
        if target is StreamPhase.FAILED_PARTIAL:
            try:
                await store.update_message(state.placeholder_id, state.text, failed_metadata())
                await store.touch_thread(thread_id)
            except Exception as exc:  # noqa: BLE001 - must not mask the stream error
                normalized_log_event(
                    self._logger,
                    "stream.partial.persist_failed",
                    ctx,
                    phase="finalize",
                    error_code=classify(exc).kind.value,
                    level=logging.ERROR,
                    message_id=state.placeholder_id,
                )
            return target
        try:
            await store.delete_message(state.placeholder_id)
        except Exception as exc:  # noqa: BLE001 - must not mask the stream error
            normalized_log_event(
                self._logger,
                "stream.placeholder.cleanup_failed",
                ctx,
                phase="finalize",
                error_code=classify(exc).kind.value,
                level=logging.ERROR,
                message_id=state.placeholder_id,
            )
        return target


__all__ = ["StreamingOrchestrator"]
