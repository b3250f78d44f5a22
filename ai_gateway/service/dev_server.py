from __future__ import annotations

import os

import uvicorn

from ..base.logging import apply_logging_config


def _parse_port(value: str | None, default: int) -> int:
    """Best-effort parse of a port from string, falling back to a sane default."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def main(host: str | None = None, port: int | None = None, reload: bool | None = None) -> None:
    """Start the development server for the gateway FastAPI app.

    Defaults come from the environment:

    - GATEWAY_HOST: interface to bind (default "127.0.0.1")
    - GATEWAY_PORT: port to bind (default 8091)
    - GATEWAY_RELOAD: "true"/"false" to toggle auto-reload (default false)
    """
    host = host or os.getenv("GATEWAY_HOST", "127.0.0.1")
    port = port or _parse_port(os.getenv("GATEWAY_PORT"), 8091)
    if reload is None:
        reload = (os.getenv("GATEWAY_RELOAD") or "").lower() == "true"
    apply_logging_config()

    uvicorn.run(
        "ai_gateway.service.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
