"""ModelHandle Protocol (single-class module).

Defines the callable surface the registry returns for a model configuration.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from ..models import ChatMessage, GenerationResult, GenerationSettings, ProviderTag
from .text_stream import TextStream


@runtime_checkable
class ModelHandle(Protocol):
    """Provider-bound handle for one upstream model.

    Implementations map ``ChatMessage`` and ``GenerationSettings`` to their
    SDK parameters and normalize responses. SDK exceptions propagate unchanged;
    the orchestrators classify them.
    """

    @property
    def provider(self) -> ProviderTag:
        """Provider family this handle talks to."""
        ...

    @property
    def model_id(self) -> str:
        """Upstream model identifier."""
        ...

    async def generate_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> GenerationResult:
        """Run one non-streaming generation."""
        ...

    async def stream_text(
        self, messages: Sequence[ChatMessage], settings: Optional[GenerationSettings] = None
    ) -> TextStream:
        """Start a streaming generation.

        Errors raised while opening the stream surface here; errors raised
        mid-stream surface from iteration.
        """
        ...
