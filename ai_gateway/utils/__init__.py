"""Framework-agnostic utilities shared across the gateway."""

from .redaction import REDACTED, redact_sensitive_data, redact_text

__all__ = ["REDACTED", "redact_sensitive_data", "redact_text"]
