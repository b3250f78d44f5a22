"""
Gateway Base Package

Exports provider-agnostic contracts, DTOs, the error taxonomy and the
provider registry used by the orchestrators and the HTTP adapter.

- Interfaces: ``ModelHandle`` / ``TextStream`` provider boundaries
- Models (DTOs): serialization-friendly request/result/event objects
- Errors: gateway exception hierarchy and the error classifier
- Registry: lazy construction of provider handles by tag
"""

from .errors import ClassifiedError, ErrorKind, GatewayError, classify, http_status_for
from .factory import ProviderRegistry, resolve_handle, sanitize_base_url
from .interfaces import ModelHandle, TextStream
from .models import (
    ChatMessage,
    ErrorEvent,
    FinishEvent,
    GenerationRequest,
    GenerationResult,
    GenerationSettings,
    ModelConfiguration,
    ProviderTag,
    Role,
    StreamEvent,
    TextDeltaEvent,
    TokenUsage,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Role",
    "ChatMessage",
    "ProviderTag",
    "ModelConfiguration",
    "GenerationSettings",
    "GenerationRequest",
    "GenerationResult",
    "TokenUsage",
    "TextDeltaEvent",
    "FinishEvent",
    "ErrorEvent",
    "StreamEvent",
    # Interfaces
    "ModelHandle",
    "TextStream",
    # Errors
    "ErrorKind",
    "ClassifiedError",
    "GatewayError",
    "classify",
    "http_status_for",
    # Registry
    "ProviderRegistry",
    "resolve_handle",
    "sanitize_base_url",
    # Timeouts
    "TimeoutConfig",
    "get_timeout_config",
]
