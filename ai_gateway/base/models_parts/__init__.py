"""Models parts package public surface.

``ai_gateway.base.models`` remains the primary stable import path.
"""

from .message import ChatMessage, Role
from .provider_tag import ProviderTag
from .model_configuration import ModelConfiguration
from .generation_settings import GenerationSettings
from .generation_request import GenerationRequest
from .token_usage import TokenUsage
from .generation_result import GenerationResult
from .stream_events import ErrorEvent, FinishEvent, StreamEvent, TextDeltaEvent

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
