"""Public re-exports for SQLite repository adapters and Unit of Work."""

from .thread_repo import ThreadRepoSqlite
from .message_repo import MessageRepoSqlite
from .model_repo import ModelRepoSqlite
from .credential_repo import CredentialRepoSqlite
from .unit_of_work import UnitOfWorkSqlite

__all__ = [
    "ThreadRepoSqlite",
    "MessageRepoSqlite",
    "ModelRepoSqlite",
    "CredentialRepoSqlite",
    "UnitOfWorkSqlite",
]
