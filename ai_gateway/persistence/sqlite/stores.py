"""Async collaborator adapters over the SQLite repositories.

``SqliteConversationStore`` implements ``TransactionalConversationStore`` and
``SqliteModelCatalog`` implements ``ModelCatalog``. Every call opens its own
connection inside a worker thread (``asyncio.to_thread``), runs one Unit of
Work and closes the connection, so the event loop never blocks on SQLite and
no connection is shared across threads.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional, TypeVar

from ...base.models import ModelConfiguration, ProviderTag
from ..interfaces.repos import CredentialRecord, ModelRecord, StoredMessage
from .engine import create_connection, init_schema
from .unit_of_work import UnitOfWorkSqlite

T = TypeVar("T")


class _SqliteAsyncBase:
    def __init__(self, db_path: Optional[str] = None, *, ensure_schema: bool = True) -> None:
        self._db_path = db_path
        if ensure_schema:
            conn = create_connection(db_path)
            try:
                init_schema(conn)
            finally:
                conn.close()

    def _run_sync(self, fn: Callable[[UnitOfWorkSqlite], T]) -> T:
        with UnitOfWorkSqlite(create_connection(self._db_path), owns_connection=True) as uow:
            return fn(uow)

    async def _run(self, fn: Callable[[UnitOfWorkSqlite], T]) -> T:
        return await asyncio.to_thread(self._run_sync, fn)


class SqliteConversationStore(_SqliteAsyncBase):
    """Conversation persistence for the orchestrators."""

    async def verify_thread_ownership(self, thread_id: str, owner_id: str) -> bool:
        return await self._run(lambda uow: uow.threads.is_owned_by(thread_id, owner_id))

    async def append_message(
        self, thread_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        return await self._run(lambda uow: uow.messages.add(thread_id, role, content, metadata))

    async def update_message(
        self, message_id: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        await self._run(lambda uow: uow.messages.update(message_id, content, metadata))

    async def delete_message(self, message_id: str) -> None:
        await self._run(lambda uow: uow.messages.delete(message_id))

    async def touch_thread(self, thread_id: str) -> None:
        await self._run(lambda uow: uow.threads.touch(thread_id))

    async def latest_message(self, thread_id: str, role: Optional[str] = None) -> Optional[StoredMessage]:
        return await self._run(lambda uow: uow.messages.latest(thread_id, role))

    async def prepare_placeholder(
        self, thread_id: str, owner_id: str, user_content: Optional[str]
    ) -> Optional[str]:
        """Ownership check, guarded user append and placeholder insert in one transaction."""

        def _prepare(uow: UnitOfWorkSqlite) -> Optional[str]:
            if not uow.threads.is_owned_by(thread_id, owner_id):
                return None
            if user_content:
                latest = uow.messages.latest(thread_id, "user")
                if latest is None or not latest.matches("user", user_content):
                    uow.messages.add(thread_id, "user", user_content)
            return uow.messages.add(thread_id, "assistant", "")

        return await self._run(_prepare)


def _to_configuration(record: ModelRecord) -> ModelConfiguration:
    try:
        provider: Any = ProviderTag(record.provider)
    except ValueError:
        # unknown tags surface as UnsupportedProviderError from the registry
        provider = record.provider
    return ModelConfiguration(
        provider=provider,
        model_id=record.model_id,
        credential_id=record.credential_id,
        base_url=record.base_url,
        name=record.name,
        id=record.id,
    )


class SqliteModelCatalog(_SqliteAsyncBase):
    """Lookup of owned model configurations and their credential records."""

    async def lookup_model_config(self, model_id: str, owner_id: str) -> Optional[ModelConfiguration]:
        record = await self._run(lambda uow: uow.models.get_owned(model_id, owner_id))
        return _to_configuration(record) if record else None

    async def lookup_credential(
        self, credential_id: str, owner_id: Optional[str] = None
    ) -> Optional[CredentialRecord]:
        if owner_id is None:
            return await self._run(lambda uow: uow.credentials.get(credential_id))
        return await self._run(lambda uow: uow.credentials.get_owned(credential_id, owner_id))


__all__ = ["SqliteConversationStore", "SqliteModelCatalog"]
