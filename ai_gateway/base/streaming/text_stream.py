"""Shared base for provider ``TextStream`` implementations.

Provider handles subclass :class:`BaseTextStream` and implement ``_iterate``
as an async generator over the SDK stream, yielding text chunks and recording
usage and finish reason as the SDK reports them. The base enforces the
single-use contract and gates ``usage()``/``finish_reason()`` on exhaustion.
"""
from __future__ import annotations

from contextlib import aclosing
from typing import AsyncIterator, Optional

from ..models import TokenUsage


class BaseTextStream:
    """Single-use async text stream with post-exhaustion metadata."""

    def __init__(self) -> None:
        self._usage: Optional[TokenUsage] = None
        self._finish_reason: Optional[str] = None
        self._started = False
        self._exhausted = False

    def __aiter__(self) -> AsyncIterator[str]:
        if self._started:
            raise RuntimeError("text stream is not restartable")
        self._started = True
        return self._run()

    async def _run(self) -> AsyncIterator[str]:
        # closes the provider iterator when the consumer stops early
        async with aclosing(self._iterate()) as chunks:
            async for chunk in chunks:
                if chunk:
                    yield chunk
        self._exhausted = True

    async def _iterate(self) -> AsyncIterator[str]:  # pragma: no cover - abstract
        raise NotImplementedError
        yield ""  # makes this an async generator for type checkers

    def _require_exhausted(self, what: str) -> None:
        if not self._exhausted:
            raise RuntimeError(f"{what} is available only after the stream is exhausted")

    async def usage(self) -> TokenUsage:
        self._require_exhausted("usage")
        return self._usage or TokenUsage()

    async def finish_reason(self) -> Optional[str]:
        self._require_exhausted("finish_reason")
        return self._finish_reason


__all__ = ["BaseTextStream"]
