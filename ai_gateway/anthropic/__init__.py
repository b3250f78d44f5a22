"""Anthropic provider family."""

from .client import AnthropicHandle

__all__ = ["AnthropicHandle"]
