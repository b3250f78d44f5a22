"""CLI parser construction for ai-gateway.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...base.models import ProviderTag


def _add_db_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db", dest="db_path", default=None, help="SQLite database path")


def _add_secret_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--secret",
        default=None,
        help="Plaintext API key; read from stdin when omitted (keeps it out of shell history)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser. Every subcommand writes one JSON object to stdout
        on success and a JSON ``{"error": ...}`` to stderr on failure.
    """
    p = argparse.ArgumentParser(prog="ai-gateway", description="AI completion gateway tools")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("generate-key", help="Print a fresh base64 master secret for ENCRYPTION_KEY")
    sub.add_parser("validate-config", help="Check that ENCRYPTION_KEY is usable")

    enc = sub.add_parser("encrypt", help="Encrypt an API key with the current master secret")
    _add_secret_flag(enc)

    reg = sub.add_parser("register-credential", help="Encrypt and store a provider API key")
    reg.add_argument("--owner", required=True)
    reg.add_argument("--provider", required=True, choices=[t.value for t in ProviderTag])
    reg.add_argument("--name", required=True)
    _add_secret_flag(reg)
    _add_db_flag(reg)

    model = sub.add_parser("register-model", help="Store a model configuration")
    model.add_argument("--owner", required=True)
    model.add_argument("--provider", required=True, choices=[t.value for t in ProviderTag])
    model.add_argument("--model", dest="upstream_model", required=True, help="Upstream model id")
    model.add_argument("--name", default=None)
    model.add_argument("--credential-id", default=None)
    model.add_argument("--base-url", default=None)
    _add_db_flag(model)

    reenc = sub.add_parser("reencrypt", help="Re-encrypt a stored key after rotating ENCRYPTION_KEY")
    reenc.add_argument("--credential-id", required=True)
    reenc.add_argument(
        "--old-key",
        default=None,
        help="Previous master secret; defaults to GATEWAY_OLD_ENCRYPTION_KEY",
    )
    _add_db_flag(reenc)

    comp = sub.add_parser("complete", help="Run one completion through a stored model")
    comp.add_argument("--owner", required=True)
    comp.add_argument("--model-id", required=True, help="Stored model configuration id")
    comp.add_argument("--prompt", required=True)
    comp.add_argument("--thread-id", default=None)
    comp.add_argument("--stream", action="store_true")
    _add_db_flag(comp)

    serve = sub.add_parser("serve", help="Run the HTTP gateway with uvicorn")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true", default=None)

    return p


__all__ = ["build_parser"]
