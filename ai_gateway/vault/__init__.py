"""Credential vault public surface."""

from .credential_vault import (
    CredentialVault,
    extract_last_chars,
    generate_encryption_key,
    get_vault,
    reset_vault,
    validate_encryption_config,
)

__all__ = [
    "CredentialVault",
    "generate_encryption_key",
    "extract_last_chars",
    "get_vault",
    "reset_vault",
    "validate_encryption_config",
]
