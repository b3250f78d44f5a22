"""SQLite-backed implementation of ``ICredentialRepo``.

Only vault blobs are stored here; encryption happens in the service layer
before a record reaches this repository. Writes defer commit to the Unit of
Work.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from ..interfaces.repos import CredentialRecord, ICredentialRepo
from .helpers import credential_from_row, new_id, utc_now_iso

_COLUMNS = "id, owner_id, provider, name, encrypted_key, key_last4, created_at, updated_at"
_FIELDS = tuple(c.strip() for c in _COLUMNS.split(","))


class CredentialRepoSqlite(ICredentialRepo):
    """SQLite-backed encrypted credential repository."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def create(
        self, owner_id: str, provider: str, name: str, encrypted_key: str, key_last4: str
    ) -> CredentialRecord:
        now = utc_now_iso()
        values = (new_id(), owner_id, provider.lower(), name, encrypted_key, key_last4, now, now)
        self.conn.execute(f"INSERT INTO credentials({_COLUMNS}) VALUES(?, ?, ?, ?, ?, ?, ?, ?)", values)
        return credential_from_row(dict(zip(_FIELDS, values)))

    def get(self, credential_id: str) -> Optional[CredentialRecord]:
        cur = self.conn.execute(f"SELECT {_COLUMNS} FROM credentials WHERE id = ?", (credential_id,))
        r = cur.fetchone()
        return credential_from_row(r) if r else None

    def get_owned(self, credential_id: str, owner_id: str) -> Optional[CredentialRecord]:
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM credentials WHERE id = ? AND owner_id = ?",
            (credential_id, owner_id),
        )
        r = cur.fetchone()
        return credential_from_row(r) if r else None

    def replace_secret(self, credential_id: str, encrypted_key: str, key_last4: str) -> bool:
        """Replace the stored blob in full; returns ``False`` when the row is missing."""
        cur = self.conn.execute(
            "UPDATE credentials SET encrypted_key = ?, key_last4 = ?, updated_at = ? WHERE id = ?",
            (encrypted_key, key_last4, utc_now_iso(), credential_id),
        )
        return cur.rowcount > 0

    def delete(self, credential_id: str) -> None:
        self.conn.execute("DELETE FROM credentials WHERE id = ?", (credential_id,))
