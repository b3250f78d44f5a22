"""CLI action handlers.

Purpose
-------
Subcommand handlers for the gateway CLI, keeping the entrypoint minimal.
This module has no top-level side effects and is safe to import in tests.

Output Contract
---------------
- Success: one JSON object on stdout, return code ``0``.
- Failure: ``{"error": ..., "kind": ...}`` on stderr, return code ``1``.
  Messages pass through the error classifier so vault internals and
  ``sk-`` style secrets never reach the terminal.
- Plaintext API keys are never echoed; only the last four characters.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, Optional

from ...base.dto.completion import CompletionInputDTO
from ...base.errors import classify
from ...base.logging import get_logger, normalized_log_event
from ...base.models import FinishEvent, ErrorEvent, TextDeltaEvent
from ...persistence.sqlite import SqliteConversationStore, SqliteModelCatalog, get_uow
from ...vault import CredentialVault, generate_encryption_key, get_vault, validate_encryption_config
from ..credentials import CredentialService
from ..gateway import GatewayService

OLD_KEY_ENV = "GATEWAY_OLD_ENCRYPTION_KEY"

_logger = get_logger("gateway.cli")


def _emit(payload: Dict[str, Any]) -> int:
    print(json.dumps(payload, ensure_ascii=False, default=str))
    return 0


def _fail(cmd: str, exc: BaseException) -> int:
    classified = classify(exc)
    normalized_log_event(
        _logger,
        f"cli.{cmd}.failed",
        phase="finalize",
        error_code=classified.kind.value,
        emitted=False,
        level=logging.WARNING,
    )
    print(json.dumps({"error": classified.message, "kind": classified.kind.value}), file=sys.stderr)
    return 1


def _read_secret(value: Optional[str]) -> str:
    """Return ``value`` or the first line of stdin."""
    if value is not None:
        return value
    return sys.stdin.readline().rstrip("\r\n")


def handle_generate_key(args: argparse.Namespace) -> int:
    return _emit({"key": generate_encryption_key()})


def handle_validate_config(args: argparse.Namespace) -> int:
    try:
        validate_encryption_config()
    except Exception as e:
        return _fail("validate-config", e)
    return _emit({"valid": True})


def handle_encrypt(args: argparse.Namespace) -> int:
    """Encrypt a key for manual insertion into a store; prints the blob only."""
    try:
        blob = get_vault().encrypt(_read_secret(args.secret))
    except Exception as e:
        return _fail("encrypt", e)
    return _emit({"encrypted": blob})


def handle_register_credential(args: argparse.Namespace) -> int:
    service = CredentialService(lambda: get_uow(args.db_path))
    try:
        record = service.register(args.owner, args.provider, args.name, _read_secret(args.secret))
    except Exception as e:
        return _fail("register-credential", e)
    return _emit({"id": record.id, "provider": record.provider, "name": record.name, "last4": record.key_last4})


def handle_register_model(args: argparse.Namespace) -> int:
    try:
        with get_uow(args.db_path) as uow:
            record = uow.models.create(
                args.owner,
                args.name or args.upstream_model,
                args.provider,
                args.upstream_model,
                credential_id=args.credential_id,
                base_url=args.base_url,
            )
    except Exception as e:
        return _fail("register-model", e)
    return _emit({"id": record.id, "provider": record.provider, "model": record.model_id, "name": record.name})


def handle_reencrypt(args: argparse.Namespace) -> int:
    """Move one credential from the old master secret to the current one."""
    old_secret = args.old_key or os.getenv(OLD_KEY_ENV)
    if not old_secret:
        print(json.dumps({"error": f"--old-key or {OLD_KEY_ENV} is required"}), file=sys.stderr)
        return 1
    service = CredentialService(lambda: get_uow(args.db_path))
    try:
        service.reencrypt(args.credential_id, CredentialVault(old_secret))
    except Exception as e:
        return _fail("reencrypt", e)
    return _emit({"id": args.credential_id, "reencrypted": True})


async def _run_complete(service: GatewayService, payload: CompletionInputDTO, owner: str, stream: bool) -> int:
    if not stream:
        result = await service.complete(payload, owner)
        return _emit(result.to_dict())
    rc = 0
    async for event in service.stream(payload, owner):
        if isinstance(event, TextDeltaEvent):
            sys.stdout.write(event.text)
            sys.stdout.flush()
        elif isinstance(event, FinishEvent):
            sys.stdout.write("\n")
            _emit(event.to_dict())
        elif isinstance(event, ErrorEvent):
            sys.stdout.write("\n")
            print(json.dumps(event.to_dict()), file=sys.stderr)
            rc = 1
    return rc


def handle_complete(args: argparse.Namespace) -> int:
    service = GatewayService(
        catalog=SqliteModelCatalog(args.db_path),
        store=SqliteConversationStore(args.db_path),
    )
    try:
        payload = CompletionInputDTO(
            model_id=args.model_id,
            messages=[{"role": "user", "content": args.prompt}],
            thread_id=args.thread_id,
        )
        return asyncio.run(_run_complete(service, payload, args.owner, args.stream))
    except Exception as e:
        return _fail("complete", e)


def handle_serve(args: argparse.Namespace) -> int:
    from ..dev_server import main as run_server

    run_server(host=args.host, port=args.port, reload=args.reload)
    return 0


HANDLERS: Dict[str, Callable[[argparse.Namespace], int]] = {
    "generate-key": handle_generate_key,
    "validate-config": handle_validate_config,
    "encrypt": handle_encrypt,
    "register-credential": handle_register_credential,
    "register-model": handle_register_model,
    "reencrypt": handle_reencrypt,
    "complete": handle_complete,
    "serve": handle_serve,
}


__all__ = ["HANDLERS", "OLD_KEY_ENV"]
