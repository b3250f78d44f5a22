"""Token usage helpers package."""

from .extraction import (
    extract_anthropic_token_usage,
    extract_gemini_token_usage,
    extract_openai_token_usage,
    finalize_usage,
)

__all__ = [
    "extract_openai_token_usage",
    "extract_anthropic_token_usage",
    "extract_gemini_token_usage",
    "finalize_usage",
]
