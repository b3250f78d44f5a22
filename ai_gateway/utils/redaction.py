"""Sensitive data redaction utilities.

Purpose
-------
Prevent credentials (provider API keys, bearer tokens, passwords) from
reaching log lines or error payloads. ``redact_sensitive_data`` walks mappings
and sequences, replacing values stored under sensitive field names and
scrubbing key-shaped substrings from free text.

This module is framework-agnostic and has no side effects on import. It is
applied by :func:`ai_gateway.base.logging.log_event` to every structured
payload before serialization.

Examples
--------
>>> redact_sensitive_data({"name": "x", "apiKey": "sk-123"})
{'name': 'x', 'apiKey': '[REDACTED]'}
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

REDACTED = "[REDACTED]"

# Compared case-insensitively against mapping keys.
SENSITIVE_FIELDS = frozenset(
    f.lower()
    for f in (
        "apiKey",
        "api_key",
        "key",
        "encryptedKey",
        "encrypted_key",
        "password",
        "token",
        "accessToken",
        "access_token",
        "refreshToken",
        "refresh_token",
        "secret",
        "privateKey",
        "private_key",
        "sessionToken",
        "session_token",
        "authorization",
        "authToken",
        "auth_token",
        "bearer",
        "credentials",
    )
)

# OpenAI, Anthropic, Google, Groq keys and JWTs.
API_KEY_PATTERN = re.compile(
    r"(sk-[a-zA-Z0-9]{32,}"
    r"|sk-ant-[a-zA-Z0-9]{32,}"
    r"|AIza[a-zA-Z0-9_-]{35}"
    r"|gsk_[a-zA-Z0-9_-]{32,}"
    r"|eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+)",
    re.IGNORECASE,
)


def redact_text(text: str) -> str:
    """Replace key-shaped substrings of ``text`` with the redaction marker."""
    return API_KEY_PATTERN.sub(REDACTED, text)


def redact_sensitive_data(data: Any, custom_fields: Optional[Iterable[str]] = None) -> Any:
    """Return a deep copy of ``data`` with sensitive values redacted.

    Parameters
    ----------
    data: Any
        Mapping, sequence, string, or scalar to sanitize.
    custom_fields: Optional[Iterable[str]]
        Extra field names (case-insensitive) to treat as sensitive.

    Returns
    -------
    Any
        New object of the same shape. Scalars other than strings are returned
        unchanged; the input is never mutated.
    """
    fields = SENSITIVE_FIELDS
    if custom_fields:
        fields = fields | {f.lower() for f in custom_fields}
    return _redact(data, fields)


def _redact(data: Any, fields: frozenset) -> Any:
    if data is None:
        return None
    if isinstance(data, str):
        return redact_text(data)
    if isinstance(data, Mapping):
        out = {}
        for k, v in data.items():
            if isinstance(k, str) and k.lower() in fields:
                out[k] = REDACTED
            else:
                out[k] = _redact(v, fields)
        return out
    if isinstance(data, (list, tuple)):
        return type(data)(_redact(item, fields) for item in data)
    return data


__all__ = [
    "REDACTED",
    "SENSITIVE_FIELDS",
    "API_KEY_PATTERN",
    "redact_text",
    "redact_sensitive_data",
]
