"""
OpenAI-compatible provider family.

Exports:
- OpenAICompatibleHandle: handle for openai, groq, ollama, openrouter and
  custom OpenAI-compatible endpoints.
"""

from .client import OpenAICompatibleHandle

__all__ = ["OpenAICompatibleHandle"]
