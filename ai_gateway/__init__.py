"""ai_gateway package

Provider-agnostic completion gateway: resolves user-owned model
configurations, decrypts their credentials, and runs streaming or
non-streaming completions against OpenAI-compatible, Anthropic and Google
backends while persisting the exchange to a conversation thread.

Public API (re-exported):
    - Version: ``__version__``
    - Errors: :class:`GatewayError`, :class:`ErrorKind`, :func:`classify`
    - Registry: :class:`ProviderRegistry`
    - Vault: :class:`CredentialVault`, :func:`generate_encryption_key`

The HTTP adapter lives in ``ai_gateway.service.app`` and the operator CLI in
``ai_gateway.service.cli``; neither is imported here.
"""

from .base.errors import ErrorKind, GatewayError, classify
from .base.factory import ProviderRegistry
from .vault import CredentialVault, generate_encryption_key

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorKind",
    "GatewayError",
    "classify",
    "ProviderRegistry",
    "CredentialVault",
    "generate_encryption_key",
]
