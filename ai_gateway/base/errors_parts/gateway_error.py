"""
Gateway exception hierarchy.

Every error the gateway raises on its own behalf derives from
:class:`GatewayError`, which carries a normalized :class:`ErrorKind` next to a
message. The classifier passes these through unchanged, so kind and message
chosen at the raise site are what the caller sees.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .classified_error import ClassifiedError
from .error_kind import ErrorKind


@dataclass(eq=False)
class GatewayError(Exception):
    """Base gateway error.

    Attributes:
        message: Human-readable message. Must never contain credential material.
        kind: Normalized :class:`ErrorKind` for the failure.
    """

    message: str
    kind: ErrorKind = ErrorKind.INTERNAL

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ValidationError(GatewayError):
    """Input failed a precondition (empty plaintext, bad settings, short key)."""

    kind: ErrorKind = ErrorKind.VALIDATION


@dataclass(eq=False)
class VaultError(GatewayError):
    """Base for credential vault failures; always reported as ``internal``."""

    kind: ErrorKind = ErrorKind.INTERNAL


@dataclass(eq=False)
class FormatError(VaultError):
    """Stored credential blob is not base64 or is shorter than nonce plus tag."""


@dataclass(eq=False)
class IntegrityError(VaultError):
    """Authentication tag check failed; the blob was tampered with or the key is wrong."""


@dataclass(eq=False)
class VaultConfigurationError(VaultError):
    """Master secret is missing or does not decode to 32 bytes."""


@dataclass(eq=False)
class NotFoundError(GatewayError):
    """Model configuration or credential record is missing or not owned by the caller."""

    kind: ErrorKind = ErrorKind.NOT_FOUND


@dataclass(eq=False)
class InvalidConfigurationError(GatewayError):
    """Model configuration cannot be used as stored (e.g. missing credential)."""

    kind: ErrorKind = ErrorKind.INVALID_CONFIGURATION


@dataclass(eq=False)
class UnsupportedProviderError(InvalidConfigurationError):
    """Provider tag is not one of the supported families."""


@dataclass(eq=False)
class ClassifiedProviderError(GatewayError):
    """Upstream provider failure after classification.

    Raised by the non-streaming completion path. ``kind`` and ``message`` come
    from the classifier; the original exception is chained as ``__cause__``.
    """

    classified: Optional[ClassifiedError] = field(default=None, repr=False)

    @classmethod
    def from_classified(cls, classified: ClassifiedError) -> "ClassifiedProviderError":
        return cls(message=classified.message, kind=classified.kind, classified=classified)


__all__ = [
    "GatewayError",
    "ValidationError",
    "VaultError",
    "FormatError",
    "IntegrityError",
    "VaultConfigurationError",
    "NotFoundError",
    "InvalidConfigurationError",
    "UnsupportedProviderError",
    "ClassifiedProviderError",
]
