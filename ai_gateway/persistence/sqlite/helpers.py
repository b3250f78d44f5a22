"""Shared helper functions for SQLite repository adapters.

Centralizes id generation, timestamp handling and row-to-DTO conversion used
by the SQLite repositories.

Note: All timestamps are written as ISO8601 UTC strings and normalized to
timezone-aware UTC ``datetime`` objects on read.
"""

from __future__ import annotations

from contextlib import suppress
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..interfaces.repos import CredentialRecord, ModelRecord, StoredMessage, Thread


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_created_at(raw: Any) -> datetime:
    """Parse a stored timestamp into an aware UTC ``datetime``.

    Strategy:
    - If ``raw`` is already a ``datetime``: ensure tz-aware (assume UTC if naive).
    - If ``raw`` is a string: attempt ISO8601 parse, coercing naive to UTC.
    - On malformed input: return epoch UTC.
    """
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if isinstance(raw, str):
        with suppress(ValueError, TypeError):
            dt = datetime.fromisoformat(raw)
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(0, tz=timezone.utc)


def dump_metadata(metadata: Optional[Dict[str, Any]]) -> str:
    return json.dumps(metadata or {}, ensure_ascii=False, default=str)


def _load_metadata(raw: Any) -> Dict[str, Any]:
    if not raw:
        return {}
    with suppress(ValueError, TypeError):
        data = json.loads(raw)
        if isinstance(data, dict):
            return data
    return {}


def thread_from_row(r: Any) -> Thread:
    return Thread(
        id=r["id"],
        owner_id=r["owner_id"],
        title=r["title"],
        created_at=_parse_created_at(r["created_at"]),
        last_activity_at=_parse_created_at(r["last_activity_at"]),
    )


def message_from_row(r: Any) -> StoredMessage:
    return StoredMessage(
        id=r["id"],
        thread_id=r["thread_id"],
        role=r["role"],
        content=r["content"],
        metadata=_load_metadata(r["metadata_json"]),
        created_at=_parse_created_at(r["created_at"]),
    )


def model_from_row(r: Any) -> ModelRecord:
    return ModelRecord(
        id=r["id"],
        owner_id=r["owner_id"],
        name=r["name"],
        provider=r["provider"],
        model_id=r["model_id"],
        credential_id=r["credential_id"],
        base_url=r["base_url"],
        created_at=_parse_created_at(r["created_at"]),
    )


def credential_from_row(r: Any) -> CredentialRecord:
    return CredentialRecord(
        id=r["id"],
        owner_id=r["owner_id"],
        provider=r["provider"],
        name=r["name"],
        encrypted_key=r["encrypted_key"],
        key_last4=r["key_last4"],
        created_at=_parse_created_at(r["created_at"]),
        updated_at=_parse_created_at(r["updated_at"]),
    )
