"""Gemini model handle.

Uses ``google-generativeai``: ``GenerativeModel.generate_content_async`` for
both one-shot and streaming (``stream=True``) generation. System turns become
the model's ``system_instruction``.

The SDK keeps its API key in process-global client configuration, so
``genai.configure`` is called under a module lock whenever a handle builds
its model object.

The configured key reaches a request only when ``generate_content_async``
binds the default client, which it does synchronously before its first
await. Callers must therefore invoke it right after ``_prepare`` with no
await in between; otherwise another handle may reconfigure the process and
one owner's request would go out with another owner's key.
"""

from __future__ import annotations

import threading
from typing import Any, AsyncIterator, Optional, Sequence

import google.generativeai as genai

from ..base.dto.adapter_params import AdapterParams
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import ChatMessage, GenerationResult, GenerationSettings, ProviderTag
from ..base.streaming import BaseTextStream
from ..base.tokens import extract_gemini_token_usage
from ..base.utils.messages import map_settings, normalize_finish_reason, split_system
from .helpers import SETTINGS_MAP, extract_text, first_finish_reason, to_contents

__all__ = ["GeminiHandle", "GeminiTextStream"]

_CONFIGURE_LOCK = threading.Lock()


class GeminiTextStream(BaseTextStream):
    """Text stream over an async ``generate_content`` response."""

    def __init__(self, response: Any) -> None:
        super().__init__()
        self._response = response

    async def _iterate(self) -> AsyncIterator[str]:
        async for chunk in self._response:
            text = extract_text(chunk)
            if getattr(chunk, "usage_metadata", None) is not None:
                self._usage = extract_gemini_token_usage(chunk)
            reason = first_finish_reason(chunk)
            if reason is not None:
                self._finish_reason = normalize_finish_reason(reason)
            if text:
                yield text


class GeminiHandle:
    """Handle bound to one Gemini model.

    Args:
        params: Resolved construction parameters from the registry.
        model_factory: Optional callable ``(model_id, system_instruction) ->
            model`` replacing ``genai.GenerativeModel`` (used by tests).
    """

    def __init__(self, params: AdapterParams, model_factory: Optional[Any] = None) -> None:
        self._params = params
        self._model_factory = model_factory
        self._logger = get_logger("gateway.providers.gemini")

    @property
    def provider(self) -> ProviderTag:
        return ProviderTag.GOOGLE

    @property
    def model_id(self) -> str:
        return self._params.model_id

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider.value, model=self.model_id)

    def _model(self, system_instruction: Optional[str]) -> Any:
        if self._model_factory is not None:
            return self._model_factory(self.model_id, system_instruction)
        with _CONFIGURE_LOCK:
            genai.configure(api_key=self._params.api_key.get_secret_value())
            return genai.GenerativeModel(self.model_id, system_instruction=system_instruction)

    def _prepare(self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings]):
        system_text, turns = split_system(messages)
        config = map_settings(settings, SETTINGS_MAP, logger=self._logger, ctx=self._ctx())
        return self._model(system_text), to_contents(turns), config

    async def generate_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GenerationResult:
        model, contents, config = self._prepare(messages, settings)
        resp = await model.generate_content_async(contents, generation_config=config or None)
        text = extract_text(resp)
        usage = extract_gemini_token_usage(resp)
        finish_reason = normalize_finish_reason(first_finish_reason(resp))
        normalized_log_event(
            self._logger,
            "provider.response",
            self._ctx(),
            phase="finalize",
            tokens=usage,
            emitted=bool(text),
            finish_reason=finish_reason,
        )
        return GenerationResult(text=text, usage=usage, finish_reason=finish_reason, raw_response=resp)

    async def stream_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GeminiTextStream:
        model, contents, config = self._prepare(messages, settings)
        resp = await model.generate_content_async(contents, generation_config=config or None, stream=True)
        return GeminiTextStream(resp)
