"""Anthropic model handle.

This module implements the Anthropic provider family using the Messages API
of the ``anthropic`` SDK (``AsyncAnthropic``): ``messages.create`` for
one-shot generation and ``messages.stream`` for streaming.

Key behaviors:
* System turns are passed as the top-level ``system`` parameter.
* Token accounting comes from ``usage.input_tokens`` / ``usage.output_tokens``;
  the total is derived.
* ``stop_reason`` is reported as the finish reason.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from anthropic import AsyncAnthropic

from ..base.dto.adapter_params import AdapterParams
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import ChatMessage, GenerationResult, GenerationSettings, ProviderTag
from ..base.tokens import extract_anthropic_token_usage
from ..base.utils.messages import normalize_finish_reason
from .helpers import build_params, extract_text
from .stream_helpers import AnthropicTextStream

__all__ = ["AnthropicHandle"]


class AnthropicHandle:
    """Handle bound to one Anthropic model.

    Args:
        params: Resolved construction parameters from the registry.
        client: Optional preconstructed SDK client (used by tests).
    """

    def __init__(self, params: AdapterParams, client: Optional[Any] = None) -> None:
        self._params = params
        self._client = client or AsyncAnthropic(
            api_key=params.api_key.get_secret_value(),
            base_url=params.base_url,
            timeout=params.timeout_seconds,
        )
        self._logger = get_logger("gateway.providers.anthropic")

    @property
    def provider(self) -> ProviderTag:
        return ProviderTag.ANTHROPIC

    @property
    def model_id(self) -> str:
        return self._params.model_id

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider.value, model=self.model_id)

    async def generate_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GenerationResult:
        params = build_params(self.model_id, messages, settings, logger=self._logger, ctx=self._ctx())
        resp = await self._client.messages.create(**params)
        text = extract_text(resp)
        usage = extract_anthropic_token_usage(resp)
        finish_reason = normalize_finish_reason(getattr(resp, "stop_reason", None))
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
    ) -> AnthropicTextStream:
        params = build_params(self.model_id, messages, settings, logger=self._logger, ctx=self._ctx())
        return AnthropicTextStream(self._client.messages.stream(**params))
