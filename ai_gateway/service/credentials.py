"""Credential registration and rotation.

Plaintext keys are validated, encrypted with the vault and stored together
with their last four characters. Nothing else about the plaintext is
persisted or logged.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..base.errors import NotFoundError, ValidationError
from ..base.log_support import LogContext
from ..base.logging import get_logger, log_event
from ..base.models import ProviderTag
from ..config.defaults import CREDENTIAL_MAX_LENGTH, CREDENTIAL_MIN_LENGTH
from ..persistence.interfaces.repos import CredentialRecord, IUnitOfWork
from ..vault import CredentialVault, extract_last_chars, get_vault


def validate_secret(secret: str) -> str:
    """Return the stripped secret or raise :class:`ValidationError`."""
    if not isinstance(secret, str):
        raise ValidationError("API key must be a string")
    candidate = secret.strip()
    if len(candidate) < CREDENTIAL_MIN_LENGTH:
        raise ValidationError(f"API key must be at least {CREDENTIAL_MIN_LENGTH} characters")
    if len(candidate) > CREDENTIAL_MAX_LENGTH:
        raise ValidationError(f"API key must be at most {CREDENTIAL_MAX_LENGTH} characters")
    return candidate


class CredentialService:
    """Register and rotate encrypted provider credentials.

    Args:
        uow_factory: Zero-argument callable returning a fresh Unit of Work.
        vault: Credential vault; defaults to the process-wide instance.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork], vault: Optional[CredentialVault] = None) -> None:
        self._uow_factory = uow_factory
        self._vault = vault
        self._logger = get_logger("gateway.credentials")

    def _get_vault(self) -> CredentialVault:
        return self._vault or get_vault()

    def register(self, owner_id: str, provider: str, name: str, secret: str) -> CredentialRecord:
        try:
            tag = ProviderTag(provider.strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unsupported provider: {provider}") from exc
        if not name or not name.strip():
            raise ValidationError("Credential name is required")
        plaintext = validate_secret(secret)
        blob = self._get_vault().encrypt(plaintext)
        with self._uow_factory() as uow:
            record = uow.credentials.create(owner_id, tag.value, name.strip(), blob, extract_last_chars(plaintext))
        log_event(
            self._logger,
            "credential.registered",
            LogContext(provider=tag.value, owner_id=owner_id),
            credential_id=record.id,
        )
        return record

    def rotate(self, credential_id: str, secret: str) -> None:
        """Replace the stored blob with an encryption of ``secret``."""
        plaintext = validate_secret(secret)
        blob = self._get_vault().encrypt(plaintext)
        with self._uow_factory() as uow:
            if not uow.credentials.replace_secret(credential_id, blob, extract_last_chars(plaintext)):
                raise NotFoundError("API key not found")
        log_event(self._logger, "credential.rotated", credential_id=credential_id)

    def reencrypt(self, credential_id: str, old_vault: CredentialVault) -> None:
        """Decrypt with ``old_vault`` and store under the current master secret."""
        with self._uow_factory() as uow:
            record = uow.credentials.get(credential_id)
            if record is None:
                raise NotFoundError("API key not found")
            plaintext = old_vault.decrypt(record.encrypted_key)
            uow.credentials.replace_secret(
                credential_id, self._get_vault().encrypt(plaintext), extract_last_chars(plaintext)
            )
        log_event(self._logger, "credential.reencrypted", credential_id=credential_id)


__all__ = ["CredentialService", "validate_secret"]
