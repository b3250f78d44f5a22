"""Gateway service: model resolution plus orchestrator dispatch.

Resolves a stored model id for an owner into a :class:`ModelConfiguration`,
decrypts its credential through the vault, builds the provider handle via the
registry and hands the request to the completion or streaming orchestrator.

Failure messages
----------------
- Model missing or not owned: ``NotFoundError`` "Model not found or you do not
  have permission to use it".
- Credential record missing: ``NotFoundError`` "API key not found".
- Vault failure of any kind: ``GatewayError`` (internal) "Failed to decrypt
  API key". Crypto detail is logged as an error kind only, never surfaced.
- Credential required but absent: ``InvalidConfigurationError`` raised by
  the registry, naming the model.

On the streaming path every one of these is delivered as a single in-band
``ErrorEvent`` instead of being raised.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, Optional, Tuple, Type

from ..base.dto.completion import CompletionInputDTO
from ..base.errors import (
    DECRYPT_FAILED_MESSAGE,
    ErrorKind,
    GatewayError,
    NotFoundError,
    VaultError,
    classify,
)
from ..base.factory import ProviderRegistry
from ..base.interfaces import ModelHandle
from ..base.log_support import LogContext
from ..base.logging import get_logger, log_event, normalized_log_event
from ..base.models import (
    ChatMessage,
    ErrorEvent,
    GenerationRequest,
    GenerationResult,
    GenerationSettings,
    ModelConfiguration,
    StreamEvent,
)
from ..config.defaults import VALIDATION_PROBE_MAX_TOKENS, VALIDATION_PROBE_PROMPT
from ..persistence.interfaces.repos import ConversationStore, ModelCatalog
from ..vault import CredentialVault, get_vault
from .completion import CompletionOrchestrator
from .streaming import StreamingOrchestrator

MODEL_NOT_FOUND_MESSAGE = "Model not found or you do not have permission to use it"
CREDENTIAL_NOT_FOUND_MESSAGE = "API key not found"
VALID_MODEL_MESSAGE = "Model is properly configured"
INVALID_MODEL_MESSAGE = "Model configuration is invalid"


class GatewayService:
    """Entry point used by the HTTP adapter and the CLI.

    Args:
        catalog: Lookup of model configurations and credential records.
        store: Conversation store; ``None`` disables persistence.
        vault: Credential vault; defaults to the process-wide instance,
            resolved lazily so a missing master secret only fails requests
            that need a credential.
        registry: Provider registry class.
    """

    def __init__(
        self,
        catalog: ModelCatalog,
        store: Optional[ConversationStore] = None,
        *,
        vault: Optional[CredentialVault] = None,
        registry: Type[ProviderRegistry] = ProviderRegistry,
    ) -> None:
        self._catalog = catalog
        self._vault = vault
        self._registry = registry
        self._completion = CompletionOrchestrator(store)
        self._streaming = StreamingOrchestrator(store)
        self._logger = get_logger("gateway.service")

    # ---------------------------------------------------------- resolution
    async def resolve(self, model_id: str, owner_id: str) -> Tuple[ModelConfiguration, ModelHandle]:
        """Return the owned configuration for ``model_id`` and its handle."""
        config = await self._catalog.lookup_model_config(model_id, owner_id)
        if config is None:
            raise NotFoundError(MODEL_NOT_FOUND_MESSAGE)
        api_key = None
        if config.credential_id:
            api_key = await self._decrypt_credential(config, config.credential_id, owner_id)
        return config, self._registry.resolve(config, api_key)

    async def _decrypt_credential(self, config: ModelConfiguration, credential_id: str, owner_id: str) -> str:
        record = await self._catalog.lookup_credential(credential_id, owner_id)
        if record is None:
            raise NotFoundError(CREDENTIAL_NOT_FOUND_MESSAGE)
        try:
            vault = self._vault or get_vault()
            return vault.decrypt(record.encrypted_key)
        except VaultError as exc:
            log_event(
                self._logger,
                "vault.decrypt.failed",
                LogContext(model=config.model_id, owner_id=owner_id),
                level=logging.ERROR,
                credential_id=credential_id,
                reason=type(exc).__name__,
            )
            raise GatewayError(DECRYPT_FAILED_MESSAGE, kind=ErrorKind.INTERNAL) from exc

    @staticmethod
    def build_request(payload: CompletionInputDTO, config: ModelConfiguration) -> GenerationRequest:
        return GenerationRequest(
            model=config,
            messages=payload.to_messages(),
            settings=payload.settings.to_settings() if payload.settings else None,
            thread_id=payload.thread_id,
        )

    # ---------------------------------------------------------- operations
    async def complete(self, payload: CompletionInputDTO, owner_id: str) -> GenerationResult:
        """Non-streaming completion; failures are raised as ``GatewayError``."""
        config, handle = await self.resolve(payload.model_id, owner_id)
        return await self._completion.complete(self.build_request(payload, config), owner_id, handle)

    async def stream(self, payload: CompletionInputDTO, owner_id: str) -> AsyncIterator[StreamEvent]:
        """Streaming completion; every failure becomes one in-band ``ErrorEvent``."""
        try:
            config, handle = await self.resolve(payload.model_id, owner_id)
        except Exception as exc:
            classified = classify(exc)
            normalized_log_event(
                self._logger,
                "stream.resolve_failed",
                LogContext(owner_id=owner_id, thread_id=payload.thread_id),
                phase="start",
                error_code=classified.kind.value,
                emitted=False,
                level=logging.WARNING,
                model_record=payload.model_id,
            )
            yield ErrorEvent(error=classified)
            return
        request = self.build_request(payload, config)
        async for event in self._streaming.stream(request, owner_id, handle):
            yield event

    async def validate_model(self, model_id: str, owner_id: str) -> Dict[str, Any]:
        """Send a short probe through the model; report ``{valid, message}``."""
        try:
            _, handle = await self.resolve(model_id, owner_id)
            await handle.generate_text(
                [ChatMessage(role="user", content=VALIDATION_PROBE_PROMPT)],
                GenerationSettings(max_tokens=VALIDATION_PROBE_MAX_TOKENS),
            )
        except GatewayError as exc:
            return {"valid": False, "message": exc.message, "kind": exc.kind.value}
        except Exception as exc:
            classified = classify(exc)
            log_event(
                self._logger,
                "model.validate.failed",
                LogContext(owner_id=owner_id),
                level=logging.WARNING,
                error_code=classified.kind.value,
                model_record=model_id,
            )
            return {"valid": False, "message": INVALID_MODEL_MESSAGE, "kind": classified.kind.value}
        return {"valid": True, "message": VALID_MODEL_MESSAGE}


__all__ = [
    "GatewayService",
    "MODEL_NOT_FOUND_MESSAGE",
    "CREDENTIAL_NOT_FOUND_MESSAGE",
]
