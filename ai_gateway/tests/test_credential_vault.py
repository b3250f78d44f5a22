"""Credential vault: AES-256-GCM with a scrypt-derived key.

Covers the stored blob layout, tamper detection, master secret validation and
the helpers exposed for credential display and key generation.
"""

from __future__ import annotations

import base64
import threading
import time

import pytest

from ai_gateway.base.errors import (
    FormatError,
    IntegrityError,
    ValidationError,
    VaultConfigurationError,
    VaultError,
)
from ai_gateway.vault import (
    CredentialVault,
    extract_last_chars,
    generate_encryption_key,
    get_vault,
    reset_vault,
    validate_encryption_config,
)


def _vault() -> CredentialVault:
    return CredentialVault(generate_encryption_key())


def test_encrypt_decrypt_round_trip_and_layout():
    vault = _vault()
    blob = vault.encrypt("sk-live-abcdefghijklmnop")
    raw = base64.b64decode(blob)
    # 12-byte nonce + 16-byte tag + ciphertext of equal length to plaintext
    assert len(raw) == 12 + 16 + len("sk-live-abcdefghijklmnop")  # nosec B101 - assert is appropriate in unit tests
    assert vault.decrypt(blob) == "sk-live-abcdefghijklmnop"  # nosec B101 - assert is appropriate in unit tests


def test_encrypt_uses_fresh_nonce_each_call():
    vault = _vault()
    a = vault.encrypt("same-secret-value")
    b = vault.encrypt("same-secret-value")
    assert a != b  # nosec B101 - assert is appropriate in unit tests
    assert base64.b64decode(a)[:12] != base64.b64decode(b)[:12]  # nosec B101 - assert is appropriate in unit tests


def test_unicode_plaintext_survives():
    vault = _vault()
    assert vault.decrypt(vault.encrypt("clé-秘密-🔑")) == "clé-秘密-🔑"  # nosec B101 - assert is appropriate in unit tests


def test_very_long_plaintext_round_trips():
    vault = _vault()
    plaintext = "\u00fc" * 1_000_000
    assert vault.decrypt(vault.encrypt(plaintext)) == plaintext  # nosec B101 - assert is appropriate in unit tests


def test_concurrent_first_use_derives_key_once(monkeypatch):
    vault = _vault()
    real_derive = vault._derive_key
    calls = []

    def counting_derive() -> bytes:
        calls.append(threading.get_ident())
        time.sleep(0.05)
        return real_derive()

    monkeypatch.setattr(vault, "_derive_key", counting_derive)
    barrier = threading.Barrier(8)
    blobs = []

    def worker(index: int) -> None:
        barrier.wait()
        blobs.append(vault.encrypt(f"provider-key-{index}"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1  # nosec B101 - assert is appropriate in unit tests
    assert sorted(vault.decrypt(b) for b in blobs) == sorted(f"provider-key-{i}" for i in range(8))  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize("offset", [0, 12, 28])
def test_flipped_byte_fails_integrity(offset):
    vault = _vault()
    raw = bytearray(base64.b64decode(vault.encrypt("provider-api-key")))
    raw[offset] ^= 0x01
    with pytest.raises(IntegrityError):
        vault.decrypt(base64.b64encode(bytes(raw)).decode("ascii"))


def test_wrong_master_secret_fails_integrity():
    blob = _vault().encrypt("provider-api-key")
    with pytest.raises(IntegrityError):
        _vault().decrypt(blob)


def test_decrypt_rejects_non_base64_and_short_blobs():
    vault = _vault()
    with pytest.raises(FormatError):
        vault.decrypt("not base64 !!")
    with pytest.raises(FormatError):
        vault.decrypt(base64.b64encode(b"\x00" * 27).decode("ascii"))


def test_empty_inputs_are_validation_errors():
    vault = _vault()
    with pytest.raises(ValidationError):
        vault.encrypt("")
    with pytest.raises(ValidationError):
        vault.decrypt("")


def test_vault_errors_share_a_base_class():
    assert issubclass(FormatError, VaultError)  # nosec B101 - assert is appropriate in unit tests
    assert issubclass(IntegrityError, VaultError)  # nosec B101 - assert is appropriate in unit tests
    assert issubclass(VaultConfigurationError, VaultError)  # nosec B101 - assert is appropriate in unit tests


def test_missing_master_secret_is_configuration_error():
    with pytest.raises(VaultConfigurationError) as exc:
        CredentialVault().encrypt("provider-api-key")
    assert "ENCRYPTION_KEY" in str(exc.value)  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize(
    "secret",
    [
        base64.b64encode(b"x" * 16).decode("ascii"),
        base64.b64encode(b"x" * 33).decode("ascii"),
        "%%%not-base64%%%",
    ],
)
def test_master_secret_must_decode_to_32_bytes(secret):
    with pytest.raises(VaultConfigurationError):
        CredentialVault(secret).validate_configuration()


def test_placeholder_master_secret_is_treated_as_unset(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", "changeme")
    reset_vault()
    with pytest.raises(VaultConfigurationError):
        validate_encryption_config()


def test_process_vault_reads_environment(master_secret):
    vault = get_vault()
    assert vault is get_vault()  # nosec B101 - assert is appropriate in unit tests
    assert validate_encryption_config() is True  # nosec B101 - assert is appropriate in unit tests
    blob = vault.encrypt("provider-api-key")
    assert CredentialVault(master_secret).decrypt(blob) == "provider-api-key"  # nosec B101 - assert is appropriate in unit tests


def test_process_vault_is_shared_across_threads(master_secret):
    barrier = threading.Barrier(6)
    seen = []

    def worker() -> None:
        barrier.wait()
        seen.append(get_vault())

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == 6  # nosec B101 - assert is appropriate in unit tests
    assert all(v is seen[0] for v in seen)  # nosec B101 - assert is appropriate in unit tests


def test_key_derivation_is_logged_without_material(log_capture):
    secret = generate_encryption_key()
    CredentialVault(secret).encrypt("provider-api-key")
    derived = log_capture.named("vault.key.derived")
    assert len(derived) == 1  # nosec B101 - assert is appropriate in unit tests
    assert all(secret not in line for line in log_capture.raw)  # nosec B101 - assert is appropriate in unit tests
    assert all("provider-api-key" not in line for line in log_capture.raw)  # nosec B101 - assert is appropriate in unit tests


def test_generate_encryption_key_is_32_random_bytes():
    a, b = generate_encryption_key(), generate_encryption_key()
    assert len(base64.b64decode(a)) == 32  # nosec B101 - assert is appropriate in unit tests
    assert a != b  # nosec B101 - assert is appropriate in unit tests


def test_extract_last_chars():
    assert extract_last_chars("sk-abcdef1234") == "1234"  # nosec B101 - assert is appropriate in unit tests
    assert extract_last_chars("abc") == "abc"  # nosec B101 - assert is appropriate in unit tests
    assert extract_last_chars("") == ""  # nosec B101 - assert is appropriate in unit tests
    assert extract_last_chars("abcdef", 2) == "ef"  # nosec B101 - assert is appropriate in unit tests
