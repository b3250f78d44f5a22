"""TextStream Protocol (single-class module).

Contract for the object returned by ``ModelHandle.stream_text``.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional, Protocol, runtime_checkable

from ..models import TokenUsage


@runtime_checkable
class TextStream(Protocol):
    """Single-use async stream of text chunks.

    Iterating yields non-empty text chunks in provider order. The stream is not
    restartable. ``usage()`` and ``finish_reason()`` resolve once iteration is
    exhausted; awaiting them earlier raises ``RuntimeError``.
    """

    def __aiter__(self) -> AsyncIterator[str]:  # pragma: no cover - interface
        ...

    async def usage(self) -> TokenUsage:  # pragma: no cover - interface
        ...

    async def finish_reason(self) -> Optional[str]:  # pragma: no cover - interface
        ...
