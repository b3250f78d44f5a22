"""SQLite-backed Unit of Work implementation aggregating repositories.

This adapter composes repository implementations and manages transaction
boundaries. On context exit it commits when no exception occurred; otherwise it
rolls back. No implicit commits happen inside repositories.
"""

from __future__ import annotations

import sqlite3

from ..interfaces.repos import IUnitOfWork
from .credential_repo import CredentialRepoSqlite
from .message_repo import MessageRepoSqlite
from .model_repo import ModelRepoSqlite
from .thread_repo import ThreadRepoSqlite


class UnitOfWorkSqlite(IUnitOfWork):
    """Unit of Work implementation for SQLite.

    Aggregates concrete repository adapters and manages transaction boundaries.
    On context exit, commits when no exception was raised; otherwise rolls back.
    When ``owns_connection`` is set the connection is also closed on exit.
    """

    def __init__(self, conn: sqlite3.Connection, *, owns_connection: bool = False) -> None:
        self._conn = conn
        self._owns_connection = owns_connection
        self.threads = ThreadRepoSqlite(conn)
        self.messages = MessageRepoSqlite(conn)
        self.models = ModelRepoSqlite(conn)
        self.credentials = CredentialRepoSqlite(conn)
        self._active = False

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def __enter__(self) -> "UnitOfWorkSqlite":
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._active = False
            if self._owns_connection:
                self._conn.close()

    def commit(self) -> None:
        """Commit the current transaction."""
        self._conn.commit()

    def rollback(self) -> None:
        """Rollback the current transaction (idempotent)."""
        self._conn.rollback()
