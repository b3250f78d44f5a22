"""Streaming invocation state machine.

One :class:`StreamState` is owned by one streaming invocation and records the
placeholder message id, the accumulated text and the current
:class:`StreamPhase`. Transitions are validated against ``_ALLOWED`` so an
orchestrator bug (e.g. finishing twice) fails loudly instead of writing a
second terminal row.

::

    INIT ──► PLACEHOLDER_CREATED ──► STREAMING ──► FINISHED
      │                                  │
      └──────────────► STREAMING         ├──► FAILED_PARTIAL  (text non-empty)
                                         └──► FAILED_EMPTY    (no text)

Failures before streaming starts go straight from INIT or
PLACEHOLDER_CREATED to FAILED_EMPTY.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class StreamPhase(str, Enum):
    INIT = "init"
    PLACEHOLDER_CREATED = "placeholder_created"
    STREAMING = "streaming"
    FINISHED = "finished"
    FAILED_PARTIAL = "failed_partial"
    FAILED_EMPTY = "failed_empty"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL: FrozenSet[StreamPhase] = frozenset(
    {StreamPhase.FINISHED, StreamPhase.FAILED_PARTIAL, StreamPhase.FAILED_EMPTY}
)

_ALLOWED: Dict[StreamPhase, FrozenSet[StreamPhase]] = {
    StreamPhase.INIT: frozenset(
        {StreamPhase.PLACEHOLDER_CREATED, StreamPhase.STREAMING, StreamPhase.FAILED_EMPTY}
    ),
    StreamPhase.PLACEHOLDER_CREATED: frozenset({StreamPhase.STREAMING, StreamPhase.FAILED_EMPTY}),
    StreamPhase.STREAMING: frozenset(
        {StreamPhase.FINISHED, StreamPhase.FAILED_PARTIAL, StreamPhase.FAILED_EMPTY}
    ),
    StreamPhase.FINISHED: frozenset(),
    StreamPhase.FAILED_PARTIAL: frozenset(),
    StreamPhase.FAILED_EMPTY: frozenset(),
}


class InvalidTransitionError(RuntimeError):
    """Raised when a phase change is not permitted by the state machine."""


@dataclass
class StreamState:
    """Mutable state of a single streaming invocation."""

    placeholder_id: Optional[str] = None
    phase: StreamPhase = StreamPhase.INIT
    _chunks: List[str] = field(default_factory=list, repr=False)

    @property
    def text(self) -> str:
        """Accumulated text so far."""
        return "".join(self._chunks)

    @property
    def has_text(self) -> bool:
        return any(self._chunks)

    def append(self, chunk: str) -> None:
        if self.phase is not StreamPhase.STREAMING:
            raise InvalidTransitionError(f"cannot append text in phase {self.phase.value}")
        self._chunks.append(chunk)

    def transition(self, target: StreamPhase) -> None:
        if target not in _ALLOWED[self.phase]:
            raise InvalidTransitionError(f"{self.phase.value} -> {target.value} is not allowed")
        self.phase = target

    def placeholder_created(self, message_id: str) -> None:
        self.transition(StreamPhase.PLACEHOLDER_CREATED)
        self.placeholder_id = message_id

    def failure_phase(self) -> StreamPhase:
        """Return the failure phase matching the accumulated text."""
        return StreamPhase.FAILED_PARTIAL if self.has_text else StreamPhase.FAILED_EMPTY


__all__ = ["StreamPhase", "StreamState", "InvalidTransitionError"]
