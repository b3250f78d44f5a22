"""Anthropic streaming helpers.

Purpose:
- Adapt ``client.messages.stream`` (an async context manager) to the
  single-use text stream contract. The HTTP request is sent when the context
  is entered, i.e. on first iteration.
"""

from __future__ import annotations

from typing import Any, AsyncIterator

from ..base.streaming import BaseTextStream
from ..base.tokens import extract_anthropic_token_usage
from ..base.utils.messages import normalize_finish_reason


class AnthropicTextStream(BaseTextStream):
    """Yield ``text_stream`` deltas; read usage and stop reason from the final message."""

    def __init__(self, stream_manager: Any) -> None:
        super().__init__()
        self._manager = stream_manager

    async def _iterate(self) -> AsyncIterator[str]:
        async with self._manager as stream:
            async for text in stream.text_stream:
                yield text
            final = await stream.get_final_message()
        self._usage = extract_anthropic_token_usage(final)
        self._finish_reason = normalize_finish_reason(getattr(final, "stop_reason", None))


__all__ = ["AnthropicTextStream"]
