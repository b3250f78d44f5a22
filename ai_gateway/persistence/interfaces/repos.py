"""Repository, Unit of Work and collaborator protocol definitions.

This module declares the contracts the gateway depends on for persistence.
Orchestrators and the gateway service depend only on these abstractions;
concrete implementations live under ``persistence/sqlite/``.

Two layers are declared:

- Synchronous repository protocols (``IThreadRepo``, ``IMessageRepo``,
  ``IModelRepo``, ``ICredentialRepo``) aggregated by ``IUnitOfWork``. These
  are what a storage backend implements.
- Async collaborator protocols (``ConversationStore``,
  ``TransactionalConversationStore``, ``ModelCatalog``) consumed by the
  orchestrators. Backends adapt their repositories to these.

Design Principles:
- No concrete behavior; pure structural typing via ``Protocol``.
- Dataclasses represent DTOs crossing repository boundaries.
- Repositories never commit; transaction control is delegated to the
  ``IUnitOfWork`` implementation.

Failure / Error Semantics:
- Repository methods raise backend-specific exceptions only in truly
  exceptional conditions (I/O failures, integrity errors). Missing rows are
  reported as ``None`` / ``False``, never as exceptions.

Security:
- ``CredentialRecord.encrypted_key`` is always a vault blob. Plaintext
  credentials never cross this boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ...base.models import ModelConfiguration

# ---------- Data Transfer Objects ----------


@dataclass
class Thread:
    """Conversation thread owned by one user.

    Attributes
    ----------
    id: Primary key.
    owner_id: Owning user id.
    title: Optional display title.
    created_at: UTC creation timestamp.
    last_activity_at: UTC timestamp bumped by ``touch``.
    """

    id: str
    owner_id: str
    title: Optional[str]
    created_at: datetime
    last_activity_at: datetime


@dataclass
class StoredMessage:
    """Persisted conversation turn.

    ``metadata`` holds ``{model, tokens, finishReason}`` for assistant turns.
    """

    id: str
    thread_id: str
    role: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    def matches(self, role: str, content: str) -> bool:
        """Whether this message has exactly ``role`` and ``content`` (duplicate guard)."""
        return self.role == role and self.content == content


@dataclass
class ModelRecord:
    """Stored model configuration row."""

    id: str
    owner_id: str
    name: str
    provider: str
    model_id: str
    credential_id: Optional[str] = None
    base_url: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class CredentialRecord:
    """Stored provider credential.

    Attributes
    ----------
    encrypted_key: ``base64(nonce || tag || ciphertext)`` vault blob.
    key_last4: Last four characters of the plaintext, for display only.
    """

    id: str
    owner_id: str
    provider: str
    name: str
    encrypted_key: str = field(repr=False)
    key_last4: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Repository Protocols ----------


class IThreadRepo(Protocol):
    """Thread storage abstraction."""

    def create(self, owner_id: str, title: Optional[str] = None) -> Thread:
        """Insert a thread and return it (no implicit commit)."""
        ...

    def get(self, thread_id: str) -> Optional[Thread]:
        ...

    def is_owned_by(self, thread_id: str, owner_id: str) -> bool:
        """Return ``True`` only when the thread exists and belongs to ``owner_id``."""
        ...

    def touch(self, thread_id: str) -> None:
        """Set ``last_activity_at`` to now (idempotent, no implicit commit)."""
        ...


class IMessageRepo(Protocol):
    """Message storage abstraction."""

    def add(
        self, thread_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Insert a message and return its id (no implicit commit)."""
        ...

    def get(self, message_id: str) -> Optional[StoredMessage]:
        ...

    def update(self, message_id: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Overwrite content and metadata of an existing message."""
        ...

    def delete(self, message_id: str) -> None:
        """Delete a message if present (idempotent)."""
        ...

    def latest(self, thread_id: str, role: Optional[str] = None) -> Optional[StoredMessage]:
        """Return the most recently stored message, optionally filtered by role."""
        ...

    def list_for_thread(self, thread_id: str) -> List[StoredMessage]:
        """Return messages in insertion order."""
        ...


class IModelRepo(Protocol):
    """Model configuration storage abstraction."""

    def create(
        self,
        owner_id: str,
        name: str,
        provider: str,
        model_id: str,
        credential_id: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> ModelRecord:
        ...

    def get(self, record_id: str) -> Optional[ModelRecord]:
        ...

    def get_owned(self, record_id: str, owner_id: str) -> Optional[ModelRecord]:
        """Return the record only when it belongs to ``owner_id``."""
        ...


class ICredentialRepo(Protocol):
    """Encrypted credential storage abstraction."""

    def create(
        self, owner_id: str, provider: str, name: str, encrypted_key: str, key_last4: str
    ) -> CredentialRecord:
        ...

    def get(self, credential_id: str) -> Optional[CredentialRecord]:
        ...

    def get_owned(self, credential_id: str, owner_id: str) -> Optional[CredentialRecord]:
        ...

    def replace_secret(self, credential_id: str, encrypted_key: str, key_last4: str) -> bool:
        """Replace the whole blob (rotation). Returns ``False`` when missing."""
        ...

    def delete(self, credential_id: str) -> None:
        ...


class IUnitOfWork(Protocol):
    """Transactional boundary aggregating repository instances.

    All write operations MUST be explicitly committed by calling ``commit()``
    (or by leaving the context without an exception); otherwise they are
    rolled back on scope exit.
    """

    threads: IThreadRepo
    messages: IMessageRepo
    models: IModelRepo
    credentials: ICredentialRepo

    def __enter__(self) -> "IUnitOfWork":  # pragma: no cover
        ...

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        """Undo all uncommitted changes (idempotent)."""
        ...


# ---------- Async collaborator protocols ----------


class ConversationStore(Protocol):
    """Async conversation persistence consumed by the orchestrators.

    Each method is an independent single-record write or read.
    """

    async def verify_thread_ownership(self, thread_id: str, owner_id: str) -> bool:
        ...

    async def append_message(
        self, thread_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        ...

    async def update_message(
        self, message_id: str, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        ...

    async def delete_message(self, message_id: str) -> None:
        ...

    async def touch_thread(self, thread_id: str) -> None:
        ...

    async def latest_message(self, thread_id: str, role: Optional[str] = None) -> Optional[StoredMessage]:
        ...


@runtime_checkable
class TransactionalConversationStore(ConversationStore, Protocol):
    """Store able to prepare a streaming placeholder atomically."""

    async def prepare_placeholder(
        self, thread_id: str, owner_id: str, user_content: Optional[str]
    ) -> Optional[str]:
        """Verify ownership, append the user turn (duplicate-guarded) and an
        empty assistant placeholder in one transaction.

        Returns the placeholder id, or ``None`` when the thread is missing or
        not owned by ``owner_id`` (nothing is written in that case).
        """
        ...


class ModelCatalog(Protocol):
    """Async lookup of stored model configurations and credentials."""

    async def lookup_model_config(self, model_id: str, owner_id: str) -> Optional[ModelConfiguration]:
        ...

    async def lookup_credential(
        self, credential_id: str, owner_id: Optional[str] = None
    ) -> Optional[CredentialRecord]:
        ...
