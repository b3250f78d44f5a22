"""
Error classification mapping arbitrary exceptions to a ``ClassifiedError``.

The classifier is a declared, ordered data table (``ERROR_PATTERNS``) rather
than a chain of conditionals so the precedence between overlapping patterns
is visible in one place and testable on its own. For example ``"quota"``
appears under ``RATE_LIMIT`` and ``"quota exceeded"`` under
``PAYMENT_REQUIRED``; because ``RATE_LIMIT`` comes first, any quota message
classifies as a rate limit.

Matching is a case-insensitive substring test against the *sanitized*
message and the extracted error code. Status attributes on SDK exceptions
are not consulted. First table entry with a hit wins.

``classify`` never raises.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional, Tuple

from .classified_error import ClassifiedError
from .error_kind import ErrorKind
from .gateway_error import GatewayError, VaultError


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"
DECRYPT_FAILED_MESSAGE = "Failed to decrypt API key"

_SECRET_PATTERN = re.compile(r"sk-[a-zA-Z0-9-]{20,}")
_SECRET_REPLACEMENT = "sk-****"


ERROR_PATTERNS: Tuple[Tuple[ErrorKind, Tuple[str, ...]], ...] = (
    (
        ErrorKind.RATE_LIMIT,
        ("rate limit", "rate_limit_exceeded", "429", "quota", "too many requests", "requests exceeded"),
    ),
    (
        ErrorKind.AUTHENTICATION,
        ("api key", "unauthorized", "401", "403", "authentication", "invalid api key", "incorrect api key"),
    ),
    (
        ErrorKind.MODEL_NOT_FOUND,
        ("model not found", "invalid model", "404", "model does not exist", "no such model"),
    ),
    (
        ErrorKind.CONTEXT_EXCEEDED,
        ("context", "context_length_exceeded", "tokens", "too long", "maximum", "exceeds maximum length"),
    ),
    (
        ErrorKind.CONTENT_POLICY,
        ("content policy", "content_filter", "safety", "moderation", "policy violation"),
    ),
    (
        ErrorKind.INVALID_REQUEST,
        ("invalid", "validation", "schema", "malformed", "bad request", "400"),
    ),
    (
        ErrorKind.NETWORK,
        ("network", "connection", "fetch", "econnrefused", "etimedout", "timeout", "dns"),
    ),
    (
        ErrorKind.SERVICE_UNAVAILABLE,
        ("503", "service unavailable", "maintenance", "overloaded", "temporarily unavailable"),
    ),
    (
        ErrorKind.PAYMENT_REQUIRED,
        ("payment", "billing", "insufficient", "402", "quota exceeded"),
    ),
)


USER_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMIT: "Rate limit exceeded. Please wait a moment and try again.",
    ErrorKind.AUTHENTICATION: "Invalid API key. Please check your provider credentials.",
    ErrorKind.MODEL_NOT_FOUND: "The specified model is not available or you do not have access to it.",
    ErrorKind.CONTEXT_EXCEEDED: "The conversation is too long. Please start a new chat or reduce the message length.",
    ErrorKind.CONTENT_POLICY: "The content was flagged by the safety filter. Please modify your message and try again.",
    ErrorKind.INVALID_REQUEST: "Invalid request format. Please check your input and try again.",
    ErrorKind.NETWORK: "Network error. Please check your connection and try again.",
    ErrorKind.SERVICE_UNAVAILABLE: "The service is temporarily unavailable. Please try again later.",
    ErrorKind.PAYMENT_REQUIRED: "Payment required or quota exceeded. Please check your billing details.",
}


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.MODEL_NOT_FOUND: 404,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONTEXT_EXCEEDED: 400,
    ErrorKind.CONTENT_POLICY: 400,
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.PAYMENT_REQUIRED: 400,
    ErrorKind.INVALID_CONFIGURATION: 400,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NETWORK: 503,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


def sanitize_message(message: Any) -> str:
    """Replace ``sk-`` style secrets in ``message`` with ``sk-****``."""
    return _SECRET_PATTERN.sub(_SECRET_REPLACEMENT, str(message or ""))


def extract_error_code(error: BaseException) -> Optional[str]:
    """Return a string ``code`` from the error or, one level down, its cause.

    Checks ``error.code`` first, then ``error.cause.code`` and
    ``error.__cause__.code``. Non-string codes are ignored.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code
    for cause in (getattr(error, "cause", None), error.__cause__):
        if cause is None:
            continue
        nested = getattr(cause, "code", None)
        if isinstance(nested, str) and nested:
            return nested
    return None


def match_kind(haystacks: Iterable[str]) -> Optional[ErrorKind]:
    """Return the first table kind with a pattern contained in any haystack."""
    lowered = [h.lower() for h in haystacks if h]
    for kind, patterns in ERROR_PATTERNS:
        if any(p in h for p in patterns for h in lowered):
            return kind
    return None


def _classify_unchecked(error: Any) -> ClassifiedError:
    if not isinstance(error, BaseException):
        return ClassifiedError(ErrorKind.INTERNAL, UNKNOWN_ERROR_MESSAGE)
    if isinstance(error, VaultError):
        return ClassifiedError(ErrorKind.INTERNAL, DECRYPT_FAILED_MESSAGE)
    if isinstance(error, GatewayError):
        return ClassifiedError(error.kind, sanitize_message(error.message) or GENERIC_ERROR_MESSAGE)

    message = sanitize_message(error)
    code = extract_error_code(error)
    kind = match_kind((message, code or ""))
    if kind is not None:
        return ClassifiedError(kind, USER_MESSAGES[kind])
    return ClassifiedError(ErrorKind.INTERNAL, message or GENERIC_ERROR_MESSAGE)


def classify(error: Any) -> ClassifiedError:
    """Classify an arbitrary error value into a :class:`ClassifiedError`.

    Precedence:
        1. Non-exception input: ``internal`` with a generic message.
        2. Vault failures: ``internal`` with a fixed decrypt message; crypto
           detail is never surfaced.
        3. Gateway errors: their own kind and (sanitized) message.
        4. Ordered pattern table over message and code.
        5. ``internal`` carrying the sanitized message.
    """
    try:
        return _classify_unchecked(error)
    except Exception:  # pragma: no cover - classifier must not raise
        return ClassifiedError(ErrorKind.INTERNAL, GENERIC_ERROR_MESSAGE)


def http_status_for(kind: ErrorKind) -> int:
    """Return the HTTP status code for ``kind`` (500 for unmapped kinds)."""
    return STATUS_BY_KIND.get(kind, 500)


__all__ = [
    "ERROR_PATTERNS",
    "USER_MESSAGES",
    "STATUS_BY_KIND",
    "UNKNOWN_ERROR_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "DECRYPT_FAILED_MESSAGE",
    "sanitize_message",
    "extract_error_code",
    "match_kind",
    "classify",
    "http_status_for",
]
