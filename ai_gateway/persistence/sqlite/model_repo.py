"""SQLite-backed implementation of ``IModelRepo``."""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..interfaces.repos import IModelRepo, ModelRecord
from .helpers import model_from_row, new_id, utc_now_iso

_COLUMNS = "id, owner_id, name, provider, model_id, credential_id, base_url, created_at"
_FIELDS = tuple(c.strip() for c in _COLUMNS.split(","))


class ModelRepoSqlite(IModelRepo):
    """SQLite-backed model configuration repository (no implicit commits)."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def create(
        self,
        owner_id: str,
        name: str,
        provider: str,
        model_id: str,
        credential_id: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> ModelRecord:
        values = (new_id(), owner_id, name, provider.lower(), model_id, credential_id, base_url, utc_now_iso())
        self.conn.execute(f"INSERT INTO models({_COLUMNS}) VALUES(?, ?, ?, ?, ?, ?, ?, ?)", values)
        return model_from_row(dict(zip(_FIELDS, values)))

    def get(self, record_id: str) -> Optional[ModelRecord]:
        cur = self.conn.execute(f"SELECT {_COLUMNS} FROM models WHERE id = ?", (record_id,))
        r = cur.fetchone()
        return model_from_row(r) if r else None

    def get_owned(self, record_id: str, owner_id: str) -> Optional[ModelRecord]:
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM models WHERE id = ? AND owner_id = ?", (record_id, owner_id)
        )
        r = cur.fetchone()
        return model_from_row(r) if r else None
