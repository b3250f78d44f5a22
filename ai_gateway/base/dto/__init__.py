"""DTO validation package for the gateway."""

from .completion import ChatMessageDTO, CompletionInputDTO, CompletionSettingsDTO
from .adapter_params import AdapterParams

__all__ = [
    "ChatMessageDTO",
    "CompletionSettingsDTO",
    "CompletionInputDTO",
    "AdapterParams",
]
