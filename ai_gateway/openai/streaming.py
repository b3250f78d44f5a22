"""Text stream over an OpenAI ``AsyncStream`` of chat completion chunks."""

from __future__ import annotations

from typing import Any, AsyncIterator

from ..base.streaming import BaseTextStream
from ..base.tokens import extract_openai_token_usage
from ..base.utils.messages import normalize_finish_reason


class OpenAITextStream(BaseTextStream):
    """Yield ``delta.content`` chunks and capture usage from the final chunk.

    With ``stream_options.include_usage`` the last chunk carries ``usage`` and
    an empty ``choices`` list.
    """

    def __init__(self, sdk_stream: Any) -> None:
        super().__init__()
        self._sdk_stream = sdk_stream

    async def _iterate(self) -> AsyncIterator[str]:
        try:
            async for chunk in self._sdk_stream:
                if getattr(chunk, "usage", None) is not None:
                    self._usage = extract_openai_token_usage(chunk)
                for choice in getattr(chunk, "choices", None) or []:
                    reason = getattr(choice, "finish_reason", None)
                    if reason:
                        self._finish_reason = normalize_finish_reason(reason)
                    delta = getattr(choice, "delta", None)
                    content = getattr(delta, "content", None)
                    if content:
                        yield content
        finally:
            close = getattr(self._sdk_stream, "close", None)
            if close is not None:
                await close()


__all__ = ["OpenAITextStream"]
