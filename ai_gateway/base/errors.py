"""Gateway error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``ai_gateway.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.classified_error import ClassifiedError
from .errors_parts.gateway_error import (
    ClassifiedProviderError,
    FormatError,
    GatewayError,
    IntegrityError,
    InvalidConfigurationError,
    NotFoundError,
    UnsupportedProviderError,
    ValidationError,
    VaultConfigurationError,
    VaultError,
)
from .errors_parts.classification import (
    DECRYPT_FAILED_MESSAGE,
    ERROR_PATTERNS,
    USER_MESSAGES,
    classify,
    http_status_for,
    sanitize_message,
)

__all__ = [
    "ErrorKind",
    "ClassifiedError",
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
    "DECRYPT_FAILED_MESSAGE",
    "ERROR_PATTERNS",
    "USER_MESSAGES",
    "classify",
    "http_status_for",
    "sanitize_message",
]
