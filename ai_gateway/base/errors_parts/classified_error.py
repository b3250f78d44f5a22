"""
Classified error value object.

A `ClassifiedError` is the only error shape that crosses the gateway boundary:
a kind from the taxonomy plus a user-facing message that has already been
scrubbed of credentials. It is immutable and never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .error_kind import ErrorKind


@dataclass(frozen=True)
class ClassifiedError:
    """Error kind and sanitized user-facing message.

    Attributes:
        kind: Normalized :class:`ErrorKind`.
        message: Message safe to show to end users.
    """

    kind: ErrorKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        """Return the wire shape ``{"kind": ..., "message": ...}``."""
        return {"kind": self.kind.value, "message": self.message}


__all__ = ["ClassifiedError"]
