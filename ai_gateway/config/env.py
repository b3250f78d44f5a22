"""ai_gateway.config.env
=====================

Centralized environment variable names and helpers for gateway settings.

Purpose
-------
- Provide a single source of truth for the environment variables the gateway
  reads (master encryption secret, database path, logging, timeouts).
- Offer small utilities to look up values in a consistent way.

Failure Modes
-------------
- Helpers never raise on unset variables; callers decide how to proceed
  (e.g., the credential vault raises its own configuration error).
"""

from __future__ import annotations

import os
from typing import Dict, Optional

# Logical setting → environment variable name
ENV_MAP: Dict[str, str] = {
    "encryption_key": "ENCRYPTION_KEY",
    "db_path": "GATEWAY_DB_PATH",
    "log_level": "GATEWAY_LOG_LEVEL",
    "log_file": "GATEWAY_LOG_FILE",
    "http_timeout_seconds": "GATEWAY_HTTP_TIMEOUT_SECONDS",
    "cors_origins": "GATEWAY_CORS_ORIGINS",
}

CONFIG_FILE_ENV = "GATEWAY_CONFIG_FILE"


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(setting: str) -> Optional[str]:
    """Return the environment variable name for a logical setting."""
    return ENV_MAP.get(setting.lower()) if setting else None


def read_setting(setting: str) -> Optional[str]:
    """Return the non-empty environment value for ``setting`` or ``None``."""
    name = get_env_var_name(setting)
    if not name:
        return None
    val = os.environ.get(name)
    return val.strip() if val and val.strip() else None


def resolve_master_secret() -> Optional[str]:
    """Return the raw master secret from ``ENCRYPTION_KEY``.

    Placeholder values are treated as unset so a copied ``.env.example`` never
    ends up encrypting real credentials.
    """
    val = read_setting("encryption_key")
    if val is None or is_placeholder(val):
        return None
    return val


__all__ = [
    "ENV_MAP",
    "CONFIG_FILE_ENV",
    "is_placeholder",
    "get_env_var_name",
    "read_setting",
    "resolve_master_secret",
]
