"""Streaming primitives: invocation state machine and the text stream base."""

from .stream_state import InvalidTransitionError, StreamPhase, StreamState
from .text_stream import BaseTextStream

__all__ = [
    "StreamPhase",
    "StreamState",
    "InvalidTransitionError",
    "BaseTextStream",
]
