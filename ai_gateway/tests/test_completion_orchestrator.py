from __future__ import annotations

import pytest

from ai_gateway.base.errors import ClassifiedProviderError, ErrorKind
from ai_gateway.base.models import (
    ChatMessage,
    GenerationRequest,
    GenerationResult,
    GenerationSettings,
    ModelConfiguration,
    ProviderTag,
    TokenUsage,
)
from ai_gateway.service.completion import CompletionOrchestrator
from ai_gateway.tests.helpers import FakeHandle, MemoryConversationStore

OWNER = "user-1"
THREAD = "thread-1"


def _request(messages=None, thread_id=THREAD, settings=None) -> GenerationRequest:
    return GenerationRequest(
        model=ModelConfiguration(provider=ProviderTag.OPENAI, model_id="gpt-test"),
        messages=messages or [ChatMessage(role="user", content="Hello")],
        settings=settings,
        thread_id=thread_id,
    )


@pytest.mark.asyncio
async def test_returns_result_and_persists_exchange():
    store = MemoryConversationStore({THREAD: OWNER})
    handle = FakeHandle(result=GenerationResult(text="Hi!", usage=TokenUsage(5, 2, 7), finish_reason="stop"))
    result = await CompletionOrchestrator(store).complete(_request(), OWNER, handle)

    assert result.text == "Hi!"  # nosec B101 - assert is appropriate in unit tests
    user, assistant = store.for_thread(THREAD)
    assert (user.role, user.content) == ("user", "Hello")  # nosec B101 - assert is appropriate in unit tests
    assert assistant.content == "Hi!"  # nosec B101 - assert is appropriate in unit tests
    assert assistant.metadata == {"model": "gpt-test", "tokens": 7, "finishReason": "stop"}  # nosec B101 - assert is appropriate in unit tests
    assert store.touched == [THREAD]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_handle_receives_messages_and_settings_once():
    settings = GenerationSettings(temperature=0.2)
    handle = FakeHandle()
    await CompletionOrchestrator().complete(_request(settings=settings, thread_id=None), OWNER, handle)
    assert len(handle.calls) == 1  # nosec B101 - assert is appropriate in unit tests
    assert handle.calls[0]["settings"] is settings  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_duplicate_user_message_is_skipped():
    store = MemoryConversationStore({THREAD: OWNER})
    await store.append_message(THREAD, "user", "Hello")
    await CompletionOrchestrator(store).complete(_request(), OWNER, FakeHandle())
    assert [m.role for m in store.for_thread(THREAD)] == ["user", "assistant"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_same_text_after_an_assistant_turn_is_still_a_repeat():
    store = MemoryConversationStore({THREAD: OWNER})
    await store.append_message(THREAD, "user", "Hello")
    await store.append_message(THREAD, "assistant", "Hi")
    await CompletionOrchestrator(store).complete(_request(), OWNER, FakeHandle())
    assert [m.role for m in store.for_thread(THREAD)] == ["user", "assistant", "assistant"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_trailing_assistant_message_skips_user_append():
    store = MemoryConversationStore({THREAD: OWNER})
    messages = [ChatMessage(role="user", content="Hello"), ChatMessage(role="assistant", content="Partial")]
    await CompletionOrchestrator(store).complete(_request(messages=messages), OWNER, FakeHandle())
    assert [m.role for m in store.for_thread(THREAD)] == ["assistant"]  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_foreign_thread_returns_text_without_persisting():
    store = MemoryConversationStore({THREAD: "other"})
    result = await CompletionOrchestrator(store).complete(_request(), OWNER, FakeHandle())
    assert result.text == "hello"  # nosec B101 - assert is appropriate in unit tests
    assert store.messages == []  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.asyncio
async def test_provider_error_is_classified_and_chained(log_capture):
    upstream = RuntimeError("Rate limit reached for gpt-test")
    store = MemoryConversationStore({THREAD: OWNER})
    with pytest.raises(ClassifiedProviderError) as exc:
        await CompletionOrchestrator(store).complete(_request(), OWNER, FakeHandle(error=upstream))
    assert exc.value.kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    assert exc.value.__cause__ is upstream  # nosec B101 - assert is appropriate in unit tests
    assert store.messages == []  # nosec B101 - assert is appropriate in unit tests
    errors = log_capture.named("complete.error")
    assert errors and errors[0]["error_code"] == "rate-limit"  # nosec B101 - assert is appropriate in unit tests
