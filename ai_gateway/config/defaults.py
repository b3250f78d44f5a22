"""ai_gateway.config.defaults
==========================

Central place for small, stable default values used across the ai_gateway
package and the lightweight service layer. These defaults can be overridden
via environment variables or external configuration, but provide sensible
fallbacks for local development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep presentation/infra layers free of magic literals.

This module avoids importing from other gateway packages to prevent circular
dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the FastAPI app.
GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


# ---- Provider base URLs ----
# OpenAI-compatible endpoints. ``custom`` falls back to the OpenAI endpoint
# when the model configuration carries no override.
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434/v1"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# Local daemons accept any bearer value; the OpenAI SDK still requires one.
OLLAMA_PLACEHOLDER_API_KEY = "ollama"  # nosec B105 - not a secret

# Suffixes stripped from user-supplied base URLs, first match wins.
BASE_URL_ENDPOINT_SUFFIXES = (
    "/v1/chat/completions",
    "/v1/completions",
    "/chat/completions",
    "/completions",
)

# Anthropic's Messages API requires max_tokens; used when settings omit it.
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096


# ---- Credential vault ----
# scrypt cost parameters for deriving the AES-256 key from the master secret.
VAULT_SCRYPT_N = 16384
VAULT_SCRYPT_R = 8
VAULT_SCRYPT_P = 1
VAULT_KEY_LENGTH = 32
VAULT_NONCE_LENGTH = 12
VAULT_TAG_LENGTH = 16
VAULT_SALT = b"ai-gateway-credential-encryption-salt-v1"

# Plaintext API key length bounds accepted on registration.
CREDENTIAL_MIN_LENGTH = 8
CREDENTIAL_MAX_LENGTH = 500


# ---- Model validation ----
# Prompt sent by the one-shot model validation probe.
VALIDATION_PROBE_PROMPT = "Say 'ok'."
VALIDATION_PROBE_MAX_TOKENS = 5


# ---- SQLite config (infrastructure) ----
# Standard busy timeout to mitigate lock contention (milliseconds).
SQLITE_BUSY_TIMEOUT_MS = 5000
# Journal and sync mode optimized for local development and light concurrency.
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"


__all__ = [
    # Service
    "GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS",
    # Providers
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "GROQ_DEFAULT_BASE_URL",
    "OLLAMA_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "OLLAMA_PLACEHOLDER_API_KEY",
    "BASE_URL_ENDPOINT_SUFFIXES",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    # Vault
    "VAULT_SCRYPT_N",
    "VAULT_SCRYPT_R",
    "VAULT_SCRYPT_P",
    "VAULT_KEY_LENGTH",
    "VAULT_NONCE_LENGTH",
    "VAULT_TAG_LENGTH",
    "VAULT_SALT",
    "CREDENTIAL_MIN_LENGTH",
    "CREDENTIAL_MAX_LENGTH",
    # Validation
    "VALIDATION_PROBE_PROMPT",
    "VALIDATION_PROBE_MAX_TOKENS",
    # SQLite
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
