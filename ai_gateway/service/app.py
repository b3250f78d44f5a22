"""FastAPI adapter exposing the gateway over HTTP.

Routes
------
- ``GET  /api/health``
- ``POST /api/complete``: non-streaming completion, JSON result.
- ``POST /api/stream``: streaming completion as NDJSON events
  (``text-delta`` ... then one ``finish`` or ``error``).
- ``POST /api/models/{model_id}/validate``: one-shot probe.

The caller identity comes from the ``X-User-Id`` header set by the upstream
auth layer. Gateway errors map to HTTP status codes via ``http_status_for``;
invalid bodies are rejected with 400.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from ..config import get_cors_origins
from .app_parts.app_core import (
    error_response,
    get_owner_id,
    get_service,
    iter_ndjson,
    validate_completion_body,
)
from .gateway import GatewayService


def create_app(service: Optional[GatewayService] = None, *, db_path: Optional[str] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        service: Preconstructed service (tests); when ``None`` one is built
            over SQLite on the first request.
        db_path: SQLite path used when building the default service.
    """
    app = FastAPI(title="AI Gateway", version="0.1.0")
    app.state.service = service
    app.state.db_path = db_path

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> Dict[str, Any]:
        return {"ok": True}

    @app.post("/api/complete")
    async def post_complete(
        body: Dict[str, Any] = Body(...),
        owner_id: str = Depends(get_owner_id),
        svc: GatewayService = Depends(get_service),
    ) -> Dict[str, Any]:
        """Run a non-streaming completion and return ``{text, usage, finishReason}``."""
        payload = validate_completion_body(body)
        try:
            result = await svc.complete(payload, owner_id)
        except Exception as e:
            raise error_response(e) from e
        return {"ok": True, "result": result.to_dict()}

    @app.post("/api/stream")
    async def post_stream(
        body: Dict[str, Any] = Body(...),
        owner_id: str = Depends(get_owner_id),
        svc: GatewayService = Depends(get_service),
    ) -> StreamingResponse:
        """Stream a completion as NDJSON; failures arrive as a final ``error`` line."""
        payload = validate_completion_body(body)
        return StreamingResponse(
            iter_ndjson(svc.stream(payload, owner_id)),
            media_type="application/x-ndjson",
        )

    @app.post("/api/models/{model_id}/validate")
    async def post_validate_model(
        model_id: str,
        owner_id: str = Depends(get_owner_id),
        svc: GatewayService = Depends(get_service),
    ) -> Dict[str, Any]:
        return await svc.validate_model(model_id, owner_id)

    return app


app = create_app()


def get_app() -> FastAPI:
    """Return the module-level FastAPI application instance."""
    return app
