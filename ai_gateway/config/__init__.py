"""Unified configuration layer for the gateway.

Goals
-----
* Centralize defaults (database path, logging level, HTTP timeout, CORS).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by GATEWAY_CONFIG_FILE
    3. Environment variables (e.g. GATEWAY_DB_PATH, GATEWAY_LOG_LEVEL)
    4. In-code overrides passed to helper
* Provide a single call site: ``get_gateway_config()``.

External Config File (Optional)
-------------------------------
If GATEWAY_CONFIG_FILE is set to a path, we attempt to load JSON first and
fall back to YAML. Structure example:

```
db_path: ~/.ai_gateway/gateway.db
log_level: DEBUG
log_file: ~/.ai_gateway/gateway.log
http_timeout_seconds: 45
cors_origins: "http://localhost:3000"
```

The master encryption secret is deliberately not read from the file; it only
comes from the ``ENCRYPTION_KEY`` environment variable.

Public API
----------
* get_gateway_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from .defaults import GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS
from .env import CONFIG_FILE_ENV, ENV_MAP, is_placeholder


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Any] = {
    "db_path": None,
    "log_level": "INFO",
    "log_file": None,
    "http_timeout_seconds": 30.0,
    "cors_origins": GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS,
}

# Settings that may come from the file or env (encryption_key is env-only).
_FILE_FIELDS = ("db_path", "log_level", "log_file", "http_timeout_seconds", "cors_origins")


_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        _FILE_CACHE = {}
        return _FILE_CACHE
    p = Path(path).expanduser()
    if not p.exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = p.read_text(encoding="utf-8")
    data: Any
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = {k: v for k, v in data.items() if k in _FILE_FIELDS}
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in _FILE_FIELDS:
        val = os.getenv(ENV_MAP[field])
        if val is not None and val.strip() and not is_placeholder(val):
            out[field] = val.strip()
    return out


def _coerce(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize value types after merging string-typed sources."""
    try:
        timeout = float(cfg.get("http_timeout_seconds") or DEFAULTS["http_timeout_seconds"])
    except (TypeError, ValueError):
        timeout = DEFAULTS["http_timeout_seconds"]
    cfg["http_timeout_seconds"] = timeout if timeout > 0 else DEFAULTS["http_timeout_seconds"]
    cfg["log_level"] = str(cfg.get("log_level") or DEFAULTS["log_level"]).upper()
    return cfg


def get_gateway_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged gateway configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return _coerce(cfg)


def get_cors_origins() -> list[str]:
    raw = get_gateway_config().get("cors_origins") or ""
    return [o.strip() for o in str(raw).split(",") if o.strip()]


def reset_config_cache() -> None:
    """Drop the cached external config file (tests, hot reload)."""
    global _FILE_CACHE
    _FILE_CACHE = None


__all__ = [
    "get_gateway_config",
    "get_cors_origins",
    "reset_config_cache",
    "DEFAULTS",
]
