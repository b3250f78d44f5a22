"""SQLite-backed implementation of ``IMessageRepo``.

Message metadata is serialized as JSON. Ordering uses ``created_at`` with the
implicit ``rowid`` as tie-breaker so messages written within the same
microsecond keep insertion order. All writes defer commit to the Unit of Work.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from ..interfaces.repos import IMessageRepo, StoredMessage
from .helpers import dump_metadata, message_from_row, new_id, utc_now_iso

_COLUMNS = "id, thread_id, role, content, metadata_json, created_at"


class MessageRepoSqlite(IMessageRepo):
    """SQLite-backed message repository."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(
        self, thread_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        message_id = new_id()
        self.conn.execute(
            f"INSERT INTO messages({_COLUMNS}) VALUES(?, ?, ?, ?, ?, ?)",
            (message_id, thread_id, role, content, dump_metadata(metadata), utc_now_iso()),
        )
        return message_id

    def get(self, message_id: str) -> Optional[StoredMessage]:
        cur = self.conn.execute(f"SELECT {_COLUMNS} FROM messages WHERE id = ?", (message_id,))
        r = cur.fetchone()
        return message_from_row(r) if r else None

    def update(self, message_id: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.conn.execute(
            "UPDATE messages SET content = ?, metadata_json = ? WHERE id = ?",
            (content, dump_metadata(metadata), message_id),
        )

    def delete(self, message_id: str) -> None:
        self.conn.execute("DELETE FROM messages WHERE id = ?", (message_id,))

    def latest(self, thread_id: str, role: Optional[str] = None) -> Optional[StoredMessage]:
        if role is None:
            cur = self.conn.execute(
                f"SELECT {_COLUMNS} FROM messages WHERE thread_id = ? "
                "ORDER BY created_at DESC, rowid DESC LIMIT 1",
                (thread_id,),
            )
        else:
            cur = self.conn.execute(
                f"SELECT {_COLUMNS} FROM messages WHERE thread_id = ? AND role = ? "
                "ORDER BY created_at DESC, rowid DESC LIMIT 1",
                (thread_id, role),
            )
        r = cur.fetchone()
        return message_from_row(r) if r else None

    def list_for_thread(self, thread_id: str) -> List[StoredMessage]:
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM messages WHERE thread_id = ? ORDER BY created_at, rowid",
            (thread_id,),
        )
        return [message_from_row(r) for r in cur.fetchall()]
