"""SQLite-backed implementation of ``IThreadRepo``.

All writes defer transaction commit to the Unit of Work.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..interfaces.repos import IThreadRepo, Thread
from .helpers import new_id, thread_from_row, utc_now_iso

_COLUMNS = "id, owner_id, title, created_at, last_activity_at"
_FIELDS = tuple(c.strip() for c in _COLUMNS.split(","))


class ThreadRepoSqlite(IThreadRepo):
    """SQLite-backed conversation thread repository."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def create(self, owner_id: str, title: Optional[str] = None) -> Thread:
        now = utc_now_iso()
        values = (new_id(), owner_id, title, now, now)
        self.conn.execute(f"INSERT INTO threads({_COLUMNS}) VALUES(?, ?, ?, ?, ?)", values)
        return thread_from_row(dict(zip(_FIELDS, values)))

    def get(self, thread_id: str) -> Optional[Thread]:
        cur = self.conn.execute(f"SELECT {_COLUMNS} FROM threads WHERE id = ?", (thread_id,))
        r = cur.fetchone()
        return thread_from_row(r) if r else None

    def is_owned_by(self, thread_id: str, owner_id: str) -> bool:
        cur = self.conn.execute(
            "SELECT 1 FROM threads WHERE id = ? AND owner_id = ?", (thread_id, owner_id)
        )
        return cur.fetchone() is not None

    def touch(self, thread_id: str) -> None:
        """Bump ``last_activity_at`` (no implicit commit)."""
        self.conn.execute(
            "UPDATE threads SET last_activity_at = ? WHERE id = ?", (utc_now_iso(), thread_id)
        )
