"""Request plumbing for the gateway HTTP adapter.

Holds the FastAPI dependencies (caller identity, service instance), strict
body validation into :class:`CompletionInputDTO`, and the mapping from
gateway errors to HTTP responses.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import HTTPException, Request
from pydantic import ValidationError

from ...base.dto.completion import CompletionInputDTO
from ...base.errors import ClassifiedError, classify, http_status_for
from ...base.models import StreamEvent
from ...persistence.sqlite import SqliteConversationStore, SqliteModelCatalog
from ..gateway import GatewayService

OWNER_HEADER = "X-User-Id"


def build_default_service(db_path: Optional[str] = None) -> GatewayService:
    """Wire a :class:`GatewayService` over the SQLite collaborators."""
    return GatewayService(
        catalog=SqliteModelCatalog(db_path),
        store=SqliteConversationStore(db_path),
    )


def get_service(request: Request) -> GatewayService:
    """FastAPI dependency returning the app's service, building it on first use."""
    state = request.app.state
    service = getattr(state, "service", None)
    if service is None:
        service = build_default_service(getattr(state, "db_path", None))
        state.service = service
    return service


def get_owner_id(request: Request) -> str:
    """Resolve the caller identity set by the upstream auth layer."""
    owner = (request.headers.get(OWNER_HEADER) or "").strip()
    if not owner:
        raise HTTPException(
            status_code=401,
            detail={"kind": "authentication", "message": f"Missing {OWNER_HEADER} header"},
        )
    return owner


def validate_completion_body(body: Dict[str, Any]) -> CompletionInputDTO:
    """Validate inbound JSON strictly; pydantic failures become HTTP 400."""
    try:
        return CompletionInputDTO.model_validate(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"kind": "validation", "message": "Invalid request", "errors": e.errors(include_url=False)},
        ) from e


def error_response(exc: Exception) -> HTTPException:
    """Classify ``exc`` and wrap it in an ``HTTPException`` with the mapped status."""
    classified: ClassifiedError = classify(exc)
    return HTTPException(status_code=http_status_for(classified.kind), detail=classified.to_dict())


async def iter_ndjson(events: AsyncIterator[StreamEvent]) -> AsyncIterator[bytes]:
    """Encode stream events as NDJSON lines."""
    async for event in events:
        yield (json.dumps(event.to_dict(), ensure_ascii=False) + "\n").encode("utf-8")


__all__ = [
    "OWNER_HEADER",
    "build_default_service",
    "get_service",
    "get_owner_id",
    "validate_completion_body",
    "error_response",
    "iter_ndjson",
]
