"""Google Gemini provider family."""

from .client import GeminiHandle

__all__ = ["GeminiHandle"]
