"""Unified timeout settings for provider SDK clients.

This module centralizes the timeout handed to the async provider SDK clients
(OpenAI, Anthropic). SDK clients enforce the value themselves; the gateway
performs no wall-clock enforcement of its own.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values.

get_timeout_config()
    Returns a process-cached configuration honouring the merged gateway
    configuration (``GATEWAY_HTTP_TIMEOUT_SECONDS`` or the config file).
"""
from __future__ import annotations

from dataclasses import dataclass
import os

from ..config import get_gateway_config


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Request timeout for SDK calls, including the
            read timeout between streamed chunks.
    """

    http_timeout_seconds: float = 30.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def get_timeout_config() -> TimeoutConfig:
    """Return process-cached ``TimeoutConfig`` instance.

    The cache is refreshed when ``GATEWAY_HTTP_TIMEOUT_SECONDS`` changes so
    tests can adjust values at runtime.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = os.getenv("GATEWAY_HTTP_TIMEOUT_SECONDS", "")
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    _CACHED = TimeoutConfig(http_timeout_seconds=float(get_gateway_config()["http_timeout_seconds"]))
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
