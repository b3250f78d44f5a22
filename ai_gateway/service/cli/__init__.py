"""Gateway operator CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no provider or vault logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import apply_logging_config
from .cli_actions import HANDLERS
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.

	Returns
	-------
	int
		Process exit code (0 success, non-zero on error).
	"""
	p = build_parser()
	args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
	if not getattr(args, "cmd", None):
		p.print_help(sys.stderr)
		return 2
	apply_logging_config()
	return HANDLERS[args.cmd](args)


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
