"""Pytest configuration for the gateway test suite.

Isolates every test from the developer's environment: the external config
file is ignored, the default database lives under ``tmp_path`` and the
process-wide vault and config caches are reset around each test.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List

import pytest

from ai_gateway.base.logging import BASE_LOGGER_NAME, get_logger
from ai_gateway.config import reset_config_cache
from ai_gateway.vault import generate_encryption_key, reset_vault


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Point config and vault at per-test state."""
    monkeypatch.delenv("GATEWAY_CONFIG_FILE", raising=False)
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)
    monkeypatch.delenv("GATEWAY_LOG_FILE", raising=False)
    monkeypatch.setenv("GATEWAY_DB_PATH", str(tmp_path / "default.db"))
    reset_config_cache()
    reset_vault()
    yield
    reset_config_cache()
    reset_vault()


@pytest.fixture()
def master_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Install a fresh ``ENCRYPTION_KEY`` for the duration of a test."""
    secret = generate_encryption_key()
    monkeypatch.setenv("ENCRYPTION_KEY", secret)
    reset_vault()
    return secret


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    """Path of an isolated on-disk SQLite database (created lazily)."""
    return str(tmp_path / "gateway.db")


class _EventLog(list):
    """Captured structured events; each item is the decoded JSON payload."""

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self if e.get("event") == event]

    def names(self) -> List[str]:
        return [str(e.get("event")) for e in self]


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[_EventLog]:
    """Collect JSON log events emitted under the shared ``gateway`` logger.

    The level is pinned to DEBUG through ``GATEWAY_LOG_LEVEL`` because
    ``get_logger`` re-applies the environment level on every call.
    """
    previous_level = get_logger(BASE_LOGGER_NAME).level
    monkeypatch.setenv("GATEWAY_LOG_LEVEL", "DEBUG")
    events = _EventLog()
    raw: List[str] = []
    events.raw = raw  # type: ignore[attr-defined]

    handler = logging.Handler(level=logging.DEBUG)

    def _emit(record: logging.LogRecord) -> None:
        msg = record.getMessage()
        raw.append(msg)
        try:
            payload = json.loads(msg)
        except ValueError:
            return
        if isinstance(payload, dict):
            events.append(payload)

    handler.emit = _emit  # type: ignore[method-assign]
    logger = get_logger(BASE_LOGGER_NAME)
    logger.addHandler(handler)
    try:
        yield events
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
