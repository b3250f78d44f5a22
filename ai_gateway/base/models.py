"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``ai_gateway.base.models_parts``.
"""

from .models_parts.message import ChatMessage, Role
from .models_parts.provider_tag import ProviderTag
from .models_parts.model_configuration import ModelConfiguration
from .models_parts.generation_settings import GenerationSettings
from .models_parts.generation_request import GenerationRequest
from .models_parts.token_usage import TokenUsage
from .models_parts.generation_result import GenerationResult
from .models_parts.stream_events import (
    ErrorEvent,
    FinishEvent,
    StreamEvent,
    TextDeltaEvent,
)

__all__ = [
    "ChatMessage",
    "Role",
    "ProviderTag",
    "ModelConfiguration",
    "GenerationSettings",
    "GenerationRequest",
    "TokenUsage",
    "GenerationResult",
    "TextDeltaEvent",
    "FinishEvent",
    "ErrorEvent",
    "StreamEvent",
]
