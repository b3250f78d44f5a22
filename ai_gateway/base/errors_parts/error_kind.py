"""
Normalized gateway error kinds (taxonomy).

Defines the `ErrorKind` enumeration attached to every classified error and
carried by gateway exceptions. Values are lowercase kebab-case and are a
stable public contract for clients, logging and HTTP status mapping.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated error kinds representing failure categories."""

    RATE_LIMIT = "rate-limit"
    AUTHENTICATION = "authentication"
    MODEL_NOT_FOUND = "model-not-found"
    CONTEXT_EXCEEDED = "context-exceeded"
    CONTENT_POLICY = "content-policy"
    INVALID_REQUEST = "invalid-request"
    NETWORK = "network"
    SERVICE_UNAVAILABLE = "service-unavailable"
    PAYMENT_REQUIRED = "payment-required"
    INTERNAL = "internal"
    # Raised by the gateway itself rather than inferred from upstream text.
    NOT_FOUND = "not-found"
    INVALID_CONFIGURATION = "invalid-configuration"
    VALIDATION = "validation"


__all__ = ["ErrorKind"]
