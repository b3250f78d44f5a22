"""Interface parts package. Prefer importing from ``ai_gateway.base.interfaces``."""

from .model_handle import ModelHandle
from .text_stream import TextStream

__all__ = ["ModelHandle", "TextStream"]
