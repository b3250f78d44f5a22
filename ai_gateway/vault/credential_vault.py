"""Credential vault: authenticated encryption of provider API keys at rest.

Purpose
-------
Encrypt provider credentials before they are persisted and decrypt them only
at the moment a provider handle is built. Plaintext credentials never touch
storage or logs.

Scheme
------
- Master secret: ``ENCRYPTION_KEY`` environment variable, base64 of exactly
  32 random bytes (see :func:`generate_encryption_key`).
- Key derivation: scrypt (n=16384, r=8, p=1, 32-byte output) over the decoded
  master secret with a fixed application salt. The derived key is computed
  once per vault instance, lazily, under a lock.
- Cipher: AES-256-GCM with a fresh 96-bit random nonce per call and a 128-bit
  tag. Each call to ``encrypt`` therefore produces a different blob for the
  same plaintext.
- Blob layout: ``base64(nonce[12] || tag[16] || ciphertext)``.

External dependencies
---------------------
- ``cryptography`` (``AESGCM`` and ``Scrypt`` from ``cryptography.hazmat``).

Failure modes
-------------
- :class:`ValidationError` for empty or non-string input.
- :class:`FormatError` when a blob is not base64 or is shorter than 28 bytes.
- :class:`IntegrityError` when the tag check fails (tampering or wrong key).
- :class:`VaultConfigurationError` when the master secret is missing or malformed.
  Messages never echo key material.

Thread-safety
-------------
Instances hold no mutable state besides the memoized cipher; concurrent
``encrypt``/``decrypt`` calls are safe. ``AESGCM`` objects are stateless.
"""

from __future__ import annotations

import base64
import binascii
import os
import threading
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..base.errors import (
    FormatError,
    IntegrityError,
    ValidationError,
    VaultConfigurationError,
)
from ..base.logging import get_logger, log_event
from ..config.defaults import (
    VAULT_KEY_LENGTH,
    VAULT_NONCE_LENGTH,
    VAULT_SALT,
    VAULT_SCRYPT_N,
    VAULT_SCRYPT_P,
    VAULT_SCRYPT_R,
    VAULT_TAG_LENGTH,
)
from ..config.env import resolve_master_secret

_MISSING_SECRET_MESSAGE = (
    "ENCRYPTION_KEY environment variable is not set. "
    "Please set a 32-byte base64-encoded key (generate one with: ai-gateway generate-key)."
)


class CredentialVault:
    """Encrypt and decrypt credentials with a lazily derived AES-256 key.

    Parameters
    ----------
    master_secret:
        Base64-encoded 32-byte master secret. When ``None`` the value of
        ``ENCRYPTION_KEY`` is read at first use.
    salt:
        scrypt salt. Changing it makes every existing blob undecryptable.
    """

    def __init__(self, master_secret: Optional[str] = None, *, salt: bytes = VAULT_SALT) -> None:
        self._master_secret = master_secret
        self._salt = salt
        self._aead: Optional[AESGCM] = None
        self._lock = threading.Lock()
        self._logger = get_logger("gateway.vault")

    # ------------------------------------------------------------------ key
    def _decode_master_secret(self) -> bytes:
        raw = self._master_secret if self._master_secret is not None else resolve_master_secret()
        if not raw:
            raise VaultConfigurationError(_MISSING_SECRET_MESSAGE)
        try:
            material = base64.b64decode(raw.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise VaultConfigurationError("Invalid ENCRYPTION_KEY: not valid base64") from exc
        if len(material) != VAULT_KEY_LENGTH:
            raise VaultConfigurationError(
                f"Invalid ENCRYPTION_KEY: must decode to exactly {VAULT_KEY_LENGTH} bytes, got {len(material)}"
            )
        return material

    def _derive_key(self) -> bytes:
        kdf = Scrypt(
            salt=self._salt,
            length=VAULT_KEY_LENGTH,
            n=VAULT_SCRYPT_N,
            r=VAULT_SCRYPT_R,
            p=VAULT_SCRYPT_P,
        )
        return kdf.derive(self._decode_master_secret())

    def _cipher(self) -> AESGCM:
        aead = self._aead
        if aead is not None:
            return aead
        with self._lock:
            if self._aead is None:
                self._aead = AESGCM(self._derive_key())
                log_event(self._logger, "vault.key.derived", kdf="scrypt", n=VAULT_SCRYPT_N)
            return self._aead

    # ------------------------------------------------------------------ api
    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` and return ``base64(nonce || tag || ciphertext)``."""
        if not isinstance(plaintext, str) or not plaintext:
            raise ValidationError("Plaintext must be a non-empty string")
        aead = self._cipher()
        nonce = os.urandom(VAULT_NONCE_LENGTH)
        # AESGCM appends the tag to the ciphertext; the stored layout puts it first.
        sealed = aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-VAULT_TAG_LENGTH], sealed[-VAULT_TAG_LENGTH:]
        return base64.b64encode(nonce + tag + ciphertext).decode("ascii")

    def decrypt(self, blob: str) -> str:
        """Verify and decrypt a blob produced by :meth:`encrypt`."""
        if not isinstance(blob, str) or not blob:
            raise ValidationError("Encrypted data must be a non-empty string")
        try:
            combined = base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise FormatError("Invalid encrypted data: not valid base64") from exc
        min_length = VAULT_NONCE_LENGTH + VAULT_TAG_LENGTH
        if len(combined) < min_length:
            raise FormatError(
                f"Invalid encrypted data: too short (expected at least {min_length} bytes, got {len(combined)})"
            )
        nonce = combined[:VAULT_NONCE_LENGTH]
        tag = combined[VAULT_NONCE_LENGTH:min_length]
        ciphertext = combined[min_length:]
        aead = self._cipher()
        try:
            plaintext = aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise IntegrityError("Decryption failed: authentication tag mismatch") from exc
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError("Decryption failed: plaintext is not valid UTF-8") from exc

    def validate_configuration(self) -> bool:
        """Derive the key now, raising :class:`VaultConfigurationError` if impossible."""
        self._cipher()
        return True


def generate_encryption_key() -> str:
    """Return a fresh master secret: base64 of 32 random bytes."""
    return base64.b64encode(os.urandom(VAULT_KEY_LENGTH)).decode("ascii")


def extract_last_chars(secret: str, count: int = 4) -> str:
    """Return the last ``count`` characters of ``secret`` for display ("" if empty)."""
    if not isinstance(secret, str) or not secret or count <= 0:
        return ""
    return secret[-count:]


_VAULT: Optional[CredentialVault] = None
_VAULT_LOCK = threading.RLock()


def get_vault() -> CredentialVault:
    """Return the process-wide vault bound to ``ENCRYPTION_KEY``."""
    global _VAULT
    vault = _VAULT
    if vault is not None:
        return vault
    with _VAULT_LOCK:
        if _VAULT is None:
            _VAULT = CredentialVault()
        return _VAULT


def reset_vault() -> None:
    """Drop the process-wide vault so the next call re-reads the environment."""
    global _VAULT
    with _VAULT_LOCK:
        _VAULT = None


def validate_encryption_config() -> bool:
    """Check that ``ENCRYPTION_KEY`` is usable (raises when it is not)."""
    return CredentialVault().validate_configuration()


__all__ = [
    "CredentialVault",
    "generate_encryption_key",
    "extract_last_chars",
    "get_vault",
    "reset_vault",
    "validate_encryption_config",
]
