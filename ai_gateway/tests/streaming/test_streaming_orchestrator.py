"""Streaming orchestrator contract.

Scenarios:
A. Happy path: ordered deltas, one finish event, placeholder finalized.
B. Mid-stream failure: partial text kept with error metadata.
C. Failure before any text: placeholder removed.
D. Consumer cancellation: compensation runs, no terminal event.
E. Compensation failures are logged and never mask the stream error.
"""

from __future__ import annotations

import pytest

from ai_gateway.base.errors import ErrorKind
from ai_gateway.base.models import (
    ChatMessage,
    ErrorEvent,
    FinishEvent,
    GenerationRequest,
    ModelConfiguration,
    ProviderTag,
    TextDeltaEvent,
    TokenUsage,
)
from ai_gateway.service.streaming import StreamingOrchestrator
from ai_gateway.tests.helpers import FakeHandle, FakeTextStream, MemoryConversationStore, collect

OWNER = "user-1"
THREAD = "thread-1"


def _request(content: str = "Hi there", thread_id: str | None = THREAD) -> GenerationRequest:
    return GenerationRequest(
        model=ModelConfiguration(provider=ProviderTag.OPENAI, model_id="gpt-test"),
        messages=[ChatMessage(role="user", content=content)],
        thread_id=thread_id,
    )


def _store() -> MemoryConversationStore:
    return MemoryConversationStore({THREAD: OWNER})


@pytest.mark.asyncio
async def test_happy_path_persists_user_and_assistant(log_capture):
    store = _store()
    handle = FakeHandle(stream=FakeTextStream(["Hel", "lo"], usage=TokenUsage(3, 4, 7), finish_reason="stop"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, handle))

    assert [type(e) for e in events] == [TextDeltaEvent, TextDeltaEvent, FinishEvent]  # nosec B101 - assert is appropriate in unit tests
    assert [e.text for e in events[:2]] == ["Hel", "lo"]  # nosec B101 - assert is appropriate in unit tests
    assert events[-1].finish_reason == "stop"  # nosec B101 - assert is appropriate in unit tests
    assert events[-1].usage == TokenUsage(3, 4, 7)  # nosec B101 - assert is appropriate in unit tests

    user, assistant = store.for_thread(THREAD)
    assert (user.role, user.content) == ("user", "Hi there")  # nosec B101 - assert is appropriate in unit tests
    assert (assistant.role, assistant.content) == ("assistant", "Hello")  # nosec B101 - assert is appropriate in unit tests
    assert assistant.metadata == {"model": "gpt-test", "tokens": 7, "finishReason": "stop"}  # nosec B101 - assert is appropriate in unit tests
    assert store.touched == [THREAD]  # nosec B101 - assert is appropriate in unit tests
    assert log_capture.named("stream.finish")  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_empty_chunks_are_not_emitted():
    handle = FakeHandle(stream=FakeTextStream(["", "a", ""]))
    events = await collect(StreamingOrchestrator(_store()).stream(_request(thread_id=None), OWNER, handle))
    assert [e.to_dict()["type"] for e in events] == ["text-delta", "finish"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_without_thread_nothing_is_persisted():
    store = _store()
    handle = FakeHandle(stream=FakeTextStream(["ok"]))
    events = await collect(StreamingOrchestrator(store).stream(_request(thread_id=None), OWNER, handle))
    assert isinstance(events[-1], FinishEvent)  # nosec B101 - assert is appropriate in unit tests
    assert store.messages == []  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_foreign_thread_streams_without_persisting():
    store = MemoryConversationStore({THREAD: "someone-else"})
    handle = FakeHandle(stream=FakeTextStream(["ok"]))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, handle))
    assert isinstance(events[-1], FinishEvent)  # nosec B101 - assert is appropriate in unit tests
    assert store.messages == []  # nosec B101 - assert is appropriate in unit tests
    assert store.touched == []  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_repeated_user_message_is_not_duplicated():
    store = _store()
    await store.append_message(THREAD, "user", "Hi there")
    handle = FakeHandle(stream=FakeTextStream(["ok"]))
    await collect(StreamingOrchestrator(store).stream(_request("Hi there"), OWNER, handle))
    roles = [m.role for m in store.for_thread(THREAD)]
    assert roles == ["user", "assistant"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_mid_stream_failure_keeps_partial_text(log_capture):
    store = _store()
    stream = FakeTextStream(["Hel"], error=ConnectionError("connection reset by peer"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, FakeHandle(stream=stream)))

    assert isinstance(events[0], TextDeltaEvent)  # nosec B101 - assert is appropriate in unit tests
    assert isinstance(events[-1], ErrorEvent)  # nosec B101 - assert is appropriate in unit tests
    assert events[-1].error.kind is ErrorKind.NETWORK  # nosec B101 - assert is appropriate in unit tests
    assert not any(isinstance(e, FinishEvent) for e in events)  # nosec B101 - assert is appropriate in unit tests

    assistant = store.for_thread(THREAD)[-1]
    assert assistant.content == "Hel"  # nosec B101 - assert is appropriate in unit tests
    assert assistant.metadata == {"model": "", "tokens": None, "finishReason": "error"}  # nosec B101 - assert is appropriate in unit tests
    assert store.touched == [THREAD]  # nosec B101 - assert is appropriate in unit tests
    failed = log_capture.named("stream.failed_partial")
    assert failed and failed[0]["error_code"] == "network"  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_start_failure_removes_placeholder():
    store = _store()
    handle = FakeHandle(error=RuntimeError("Rate limit reached"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, handle))

    assert len(events) == 1  # nosec B101 - assert is appropriate in unit tests
    assert events[0].error.kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    # the user turn stays, the empty assistant placeholder is gone
    assert [m.role for m in store.for_thread(THREAD)] == ["user"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_failure_before_first_chunk_removes_placeholder():
    store = _store()
    stream = FakeTextStream([], error=RuntimeError("The model does not exist"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, FakeHandle(stream=stream)))
    assert events[-1].error.kind is ErrorKind.MODEL_NOT_FOUND  # nosec B101 - assert is appropriate in unit tests
    assert all(m.role != "assistant" for m in store.messages)  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_cleanup_failure_does_not_mask_original_error(log_capture):
    store = _store()
    store.fail_delete = True
    handle = FakeHandle(error=RuntimeError("Incorrect API key provided"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, handle))
    assert events[-1].error.kind is ErrorKind.AUTHENTICATION  # nosec B101 - assert is appropriate in unit tests
    assert log_capture.named("stream.placeholder.cleanup_failed")  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_partial_persist_failure_is_logged(log_capture):
    store = _store()
    store.fail_update = True
    stream = FakeTextStream(["x"], error=TimeoutError("timeout"))
    events = await collect(StreamingOrchestrator(store).stream(_request(), OWNER, FakeHandle(stream=stream)))
    assert events[-1].error.kind is ErrorKind.NETWORK  # nosec B101 - assert is appropriate in unit tests
    assert log_capture.named("stream.partial.persist_failed")  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_consumer_cancellation_compensates_without_terminal_event(log_capture):
    store = _store()
    stream = FakeTextStream(["Hel", "lo", " world"])
    gen = StreamingOrchestrator(store).stream(_request(), OWNER, FakeHandle(stream=stream))

    first = await gen.__anext__()
    assert first == TextDeltaEvent(text="Hel")  # nosec B101 - assert is appropriate in unit tests
    await gen.aclose()

    assert stream.closed  # nosec B101 - assert is appropriate in unit tests
    assistant = store.for_thread(THREAD)[-1]
    assert assistant.content == "Hel"  # nosec B101 - assert is appropriate in unit tests
    assert assistant.metadata["finishReason"] == "error"  # nosec B101 - assert is appropriate in unit tests
    cancelled = log_capture.named("stream.cancelled")
    assert cancelled and cancelled[0]["outcome"] == "failed_partial"  # nosec B101 - assert is appropriate in unit tests
    assert not log_capture.named("stream.finish")  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_cancellation_before_text_removes_placeholder():
    store = _store()
    stream = FakeTextStream(["late"])
    gen = StreamingOrchestrator(store).stream(_request(), OWNER, FakeHandle(stream=stream))
    await gen.aclose()
    # never started: nothing was written
    assert store.messages == []  # nosec B101 - assert is appropriate in unit tests
