"""Test doubles shared across the gateway suite.

- ``FakeTextStream``: scripted chunks, optional mid-stream failure.
- ``FakeHandle``: ``ModelHandle`` returning scripted results or streams.
- ``MemoryConversationStore``: non-transactional ``ConversationStore`` kept
  in a list, with switches to make individual writes fail.
- ``MemoryCatalog``: ``ModelCatalog`` over two dictionaries.
"""

from __future__ import annotations

import itertools
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ai_gateway.base.models import (
    ChatMessage,
    GenerationResult,
    GenerationSettings,
    ModelConfiguration,
    ProviderTag,
    TokenUsage,
)
from ai_gateway.base.streaming import BaseTextStream
from ai_gateway.persistence.interfaces.repos import CredentialRecord, StoredMessage


class FakeTextStream(BaseTextStream):
    def __init__(
        self,
        chunks: Iterable[str],
        *,
        error: Optional[BaseException] = None,
        usage: Optional[TokenUsage] = None,
        finish_reason: Optional[str] = "stop",
    ) -> None:
        super().__init__()
        self._scripted = list(chunks)
        self._error = error
        self._final_usage = usage if usage is not None else TokenUsage(3, 4, 7)
        self._final_reason = finish_reason
        self.closed = False

    async def _iterate(self):
        try:
            for chunk in self._scripted:
                yield chunk
            if self._error is not None:
                raise self._error
            self._usage = self._final_usage
            self._finish_reason = self._final_reason
        finally:
            self.closed = True


class FakeHandle:
    """Scripted ``ModelHandle``; records every call it receives."""

    def __init__(
        self,
        *,
        result: Optional[GenerationResult] = None,
        stream: Optional[FakeTextStream] = None,
        error: Optional[BaseException] = None,
        provider: ProviderTag = ProviderTag.OPENAI,
        model_id: str = "gpt-test",
    ) -> None:
        self._result = result or GenerationResult(text="hello", usage=TokenUsage(2, 3, 5), finish_reason="stop")
        self._stream = stream
        self._error = error
        self._provider = provider
        self._model_id = model_id
        self.calls: List[Dict[str, Any]] = []

    @property
    def provider(self) -> ProviderTag:
        return self._provider

    @property
    def model_id(self) -> str:
        return self._model_id

    async def generate_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GenerationResult:
        self.calls.append({"op": "generate", "messages": list(messages), "settings": settings})
        if self._error is not None:
            raise self._error
        return self._result

    async def stream_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> FakeTextStream:
        self.calls.append({"op": "stream", "messages": list(messages), "settings": settings})
        if self._error is not None:
            raise self._error
        assert self._stream is not None  # nosec B101 - test double misconfigured otherwise
        return self._stream


class MemoryConversationStore:
    """In-memory ``ConversationStore`` without the transactional extension."""

    def __init__(self, threads: Optional[Dict[str, str]] = None) -> None:
        self.threads: Dict[str, str] = dict(threads or {})
        self.messages: List[StoredMessage] = []
        self.touched: List[str] = []
        self.fail_update = False
        self.fail_delete = False
        self._ids = itertools.count(1)

    def for_thread(self, thread_id: str) -> List[StoredMessage]:
        return [m for m in self.messages if m.thread_id == thread_id]

    def get(self, message_id: str) -> Optional[StoredMessage]:
        return next((m for m in self.messages if m.id == message_id), None)

    async def verify_thread_ownership(self, thread_id: str, owner_id: str) -> bool:
        return self.threads.get(thread_id) == owner_id

    async def append_message(
        self, thread_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        message_id = f"m{next(self._ids)}"
        self.messages.append(StoredMessage(message_id, thread_id, role, content, dict(metadata or {})))
        return message_id

    async def update_message(
        self, message_id: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        if self.fail_update:
            raise RuntimeError("database is locked")
        message = self.get(message_id)
        if message is not None:
            message.content = content
            message.metadata = dict(metadata or {})

    async def delete_message(self, message_id: str) -> None:
        if self.fail_delete:
            raise RuntimeError("database is locked")
        self.messages = [m for m in self.messages if m.id != message_id]

    async def touch_thread(self, thread_id: str) -> None:
        self.touched.append(thread_id)

    async def latest_message(self, thread_id: str, role: Optional[str] = None) -> Optional[StoredMessage]:
        for message in reversed(self.messages):
            if message.thread_id == thread_id and (role is None or message.role == role):
                return message
        return None


class MemoryCatalog:
    """``ModelCatalog`` keyed by ``(model_id, owner_id)`` and credential id."""

    def __init__(
        self,
        models: Optional[Dict[tuple, ModelConfiguration]] = None,
        credentials: Optional[Dict[str, CredentialRecord]] = None,
    ) -> None:
        self.models = dict(models or {})
        self.credentials = dict(credentials or {})

    async def lookup_model_config(self, model_id: str, owner_id: str) -> Optional[ModelConfiguration]:
        return self.models.get((model_id, owner_id))

    async def lookup_credential(
        self, credential_id: str, owner_id: Optional[str] = None
    ) -> Optional[CredentialRecord]:
        record = self.credentials.get(credential_id)
        if record is None or (owner_id is not None and record.owner_id != owner_id):
            return None
        return record


async def collect(events) -> List[Any]:
    return [e async for e in events]
