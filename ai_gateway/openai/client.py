"""OpenAI-compatible model handle.

One handle class serves every provider family that speaks the OpenAI Chat
Completions protocol (``openai``, ``groq``, ``ollama``, ``openrouter`` and
``custom``); the registry supplies the family's base URL.

External dependencies
---------------------
- ``openai`` SDK (``AsyncOpenAI``). The credential is unwrapped from
  ``SecretStr`` only when the SDK client is constructed.

Settings
--------
``top_k`` has no Chat Completions counterpart and is dropped with a debug
event. Everything else maps one to one. Streaming usage
(``stream_options.include_usage``) is requested from the ``openai`` family only.

SDK exceptions propagate unchanged; the orchestrators classify them.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openai import AsyncOpenAI

from ..base.dto.adapter_params import AdapterParams
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import ChatMessage, GenerationResult, GenerationSettings, ProviderTag
from ..base.tokens import extract_openai_token_usage
from ..base.utils.messages import map_settings, normalize_finish_reason
from .streaming import OpenAITextStream

__all__ = ["OpenAICompatibleHandle", "SETTINGS_MAP"]

SETTINGS_MAP: Dict[str, str] = {
    "temperature": "temperature",
    "max_tokens": "max_tokens",
    "top_p": "top_p",
    "frequency_penalty": "frequency_penalty",
    "presence_penalty": "presence_penalty",
}


class OpenAICompatibleHandle:
    """Handle bound to one model on an OpenAI-compatible endpoint.

    Args:
        params: Resolved construction parameters from the registry.
        client: Optional preconstructed SDK client (used by tests).
    """

    def __init__(self, params: AdapterParams, client: Optional[Any] = None) -> None:
        self._params = params
        self._client = client or AsyncOpenAI(
            api_key=params.api_key.get_secret_value(),
            base_url=params.base_url,
            timeout=params.timeout_seconds,
        )
        self._logger = get_logger("gateway.providers.openai")

    @property
    def provider(self) -> ProviderTag:
        return self._params.provider

    @property
    def model_id(self) -> str:
        return self._params.model_id

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider.value, model=self.model_id)

    def _request_params(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings]
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": self.model_id,
            "messages": [m.to_dict() for m in messages],
        }
        params.update(map_settings(settings, SETTINGS_MAP, logger=self._logger, ctx=self._ctx()))
        return params

    async def generate_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GenerationResult:
        """Run one ``chat.completions.create`` call and normalize the response."""
        resp = await self._client.chat.completions.create(**self._request_params(messages, settings))
        choices = getattr(resp, "choices", None) or []
        first = choices[0] if choices else None
        message = getattr(first, "message", None)
        text = getattr(message, "content", None) or ""
        usage = extract_openai_token_usage(resp)
        finish_reason = normalize_finish_reason(getattr(first, "finish_reason", None))
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
    ) -> OpenAITextStream:
        """Open a streaming completion; connection errors surface here."""
        params = self._request_params(messages, settings)
        params["stream"] = True
        if self.provider is ProviderTag.OPENAI:
            # other OpenAI-compatible servers may reject the field; usage then stays empty
            params["stream_options"] = {"include_usage": True}
        sdk_stream = await self._client.chat.completions.create(**params)
        return OpenAITextStream(sdk_stream)
