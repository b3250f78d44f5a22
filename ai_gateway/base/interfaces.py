"""
Provider-agnostic interface contracts public surface.

Re-exports the one-class-per-file Protocols under
``ai_gateway.base.interfaces_parts``.
"""

from .interfaces_parts.model_handle import ModelHandle
from .interfaces_parts.text_stream import TextStream

__all__ = ["ModelHandle", "TextStream"]
