"""SQLite engine helpers for the persistence layer.

Purpose
-------
Provide centralized helpers for opening SQLite connections and ensuring the
gateway schema exists.

External dependencies
---------------------
- Standard library only (``sqlite3``). No side effects at import time.

Timeout and reliability strategy
--------------------------------
- Applies a standard ``busy_timeout`` (milliseconds) from
  ``ai_gateway.config.defaults`` to mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode for durability with good
  interactive performance.
- Enables foreign keys so deleting a thread removes its messages and deleting
  a credential detaches it from model configurations.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from ...config import get_gateway_config
from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

DEFAULT_DB_PATH = Path("~/.ai_gateway/gateway.db")


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return a concrete database file path.

    Resolution order: explicit ``db_path``, then ``db_path`` from the merged
    gateway configuration (``GATEWAY_DB_PATH``), then ``DEFAULT_DB_PATH``.
    ``~`` is expanded.
    """
    chosen = db_path or get_gateway_config().get("db_path")
    return Path(chosen).expanduser() if chosen else DEFAULT_DB_PATH.expanduser()


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults and apply PRAGMA settings.

    Behavior
    --------
    - Ensures the parent directory exists prior to opening the database file.
    - Avoids ``detect_types``; repositories store and parse ISO8601 strings
      explicitly.

    Returns
    -------
    sqlite3.Connection
        An open connection with ``row_factory`` set to ``sqlite3.Row``.
    """
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create required tables if they do not exist, then commit.

    Schema overview
    ---------------
    - ``threads``: conversation threads with owner and last-activity time
    - ``messages``: ordered turns per thread; metadata serialized as JSON
    - ``credentials``: vault blobs plus last four characters for display
    - ``models``: user-owned model configurations referencing a credential
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS threads (
            id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            title TEXT,
            created_at TEXT NOT NULL,
            last_activity_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_threads_owner ON threads(owner_id);

        CREATE TABLE IF NOT EXISTS messages (
            id TEXT PRIMARY KEY,
            thread_id TEXT NOT NULL REFERENCES threads(id) ON DELETE CASCADE,
            role TEXT NOT NULL CHECK (role IN ('user', 'assistant', 'system')),
            content TEXT NOT NULL,
            metadata_json TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_messages_thread ON messages(thread_id, created_at);

        CREATE TABLE IF NOT EXISTS credentials (
            id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            provider TEXT NOT NULL,
            name TEXT NOT NULL,
            encrypted_key TEXT NOT NULL,
            key_last4 TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS models (
            id TEXT PRIMARY KEY,
            owner_id TEXT NOT NULL,
            name TEXT NOT NULL,
            provider TEXT NOT NULL,
            model_id TEXT NOT NULL,
            credential_id TEXT REFERENCES credentials(id) ON DELETE SET NULL,
            base_url TEXT,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.commit()
