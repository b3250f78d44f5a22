"""Provider registry.

Purpose
-------
Turn a stored :class:`ModelConfiguration` plus its decrypted credential into a
provider-bound :class:`ModelHandle`. Handle classes are imported lazily with
``importlib`` so that importing the registry never pulls in provider SDKs.

Dispatch
--------
``ProviderRegistry._PROVIDERS`` maps every :class:`ProviderTag` to the module
and class of its handle. The table is checked against the enum at import
time; ``_default_base_url`` uses ``match`` with ``assert_never`` so a new tag
without a default is also a type-checker error.

Families
--------
- OpenAI-compatible (``openai``, ``groq``, ``ollama``, ``openrouter``,
  ``custom``): ``ai_gateway.openai.client.OpenAICompatibleHandle``.
- ``anthropic``: ``ai_gateway.anthropic.client.AnthropicHandle``.
- ``google``: ``ai_gateway.gemini.client.GeminiHandle`` (SDK default endpoint).

Failure modes
-------------
- :class:`UnsupportedProviderError` for a tag outside the table.
- :class:`InvalidConfigurationError` when a credential is required but absent.

The registry is stateless; no timeouts, retries or fallbacks are applied here.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Optional, Tuple, Type, assert_never
from urllib.parse import urlsplit, urlunsplit

from ..config.defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    BASE_URL_ENDPOINT_SUFFIXES,
    GROQ_DEFAULT_BASE_URL,
    OLLAMA_DEFAULT_BASE_URL,
    OLLAMA_PLACEHOLDER_API_KEY,
    OPENAI_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_BASE_URL,
)
from .dto.adapter_params import AdapterParams
from .errors import InvalidConfigurationError, UnsupportedProviderError
from .interfaces import ModelHandle
from .log_support import LogContext
from .logging import get_logger, log_event
from .models import ModelConfiguration, ProviderTag
from .timeouts import get_timeout_config

_OPENAI_COMPATIBLE = {"module": "ai_gateway.openai.client", "class": "OpenAICompatibleHandle"}


def sanitize_base_url(url: Optional[str]) -> Optional[str]:
    """Normalize a user-supplied base URL.

    Strips the first matching well-known completion endpoint suffix and a
    trailing slash (unless the path is just ``/``). Input that does not parse
    as an absolute URL is returned unchanged; empty input yields ``None``.
    """
    if url is None:
        return None
    raw = url.strip()
    if not raw:
        return None
    try:
        parts = urlsplit(raw)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    path = parts.path
    for suffix in BASE_URL_ENDPOINT_SUFFIXES:
        if path.endswith(suffix):
            path = path[: -len(suffix)]
            break
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def _default_base_url(tag: ProviderTag) -> Optional[str]:
    match tag:
        case ProviderTag.OPENAI | ProviderTag.CUSTOM:
            return OPENAI_DEFAULT_BASE_URL
        case ProviderTag.ANTHROPIC:
            return ANTHROPIC_DEFAULT_BASE_URL
        case ProviderTag.GROQ:
            return GROQ_DEFAULT_BASE_URL
        case ProviderTag.OLLAMA:
            return OLLAMA_DEFAULT_BASE_URL
        case ProviderTag.OPENROUTER:
            return OPENROUTER_DEFAULT_BASE_URL
        case ProviderTag.GOOGLE:
            return None
        case _:
            assert_never(tag)


class ProviderRegistry:
    """Resolve model configurations into provider handles.

    Design notes
    ------------
    - Uses ``importlib.import_module`` for explicit, lazy import semantics.
    - Validation happens before any import so configuration errors never
      depend on which SDKs are installed.
    """

    # Map provider tags to handle import paths and class names
    _PROVIDERS: Dict[ProviderTag, Dict[str, str]] = {
        ProviderTag.OPENAI: _OPENAI_COMPATIBLE,
        ProviderTag.GROQ: _OPENAI_COMPATIBLE,
        ProviderTag.OLLAMA: _OPENAI_COMPATIBLE,
        ProviderTag.OPENROUTER: _OPENAI_COMPATIBLE,
        ProviderTag.CUSTOM: _OPENAI_COMPATIBLE,
        ProviderTag.ANTHROPIC: {"module": "ai_gateway.anthropic.client", "class": "AnthropicHandle"},
        ProviderTag.GOOGLE: {"module": "ai_gateway.gemini.client", "class": "GeminiHandle"},
    }

    @classmethod
    def resolve(cls, config: ModelConfiguration, api_key: Optional[str]) -> ModelHandle:
        """Build the handle for ``config`` using the plaintext ``api_key``.

        Parameters
        ----------
        config:
            Stored model configuration.
        api_key:
            Decrypted credential, or ``None`` when the configuration carries no
            credential reference.

        Returns
        -------
        ModelHandle
            Provider-bound handle ready for ``generate_text``/``stream_text``.

        Raises
        ------
        UnsupportedProviderError
            If the provider tag is not registered.
        InvalidConfigurationError
            If a credential is required and missing.
        """
        tag = cls._coerce_tag(config.provider)
        spec = cls._PROVIDERS.get(tag) if tag is not None else None
        if tag is None or spec is None:
            raise UnsupportedProviderError(f"Unsupported provider: {config.provider}")

        params = cls.build_params(config, tag, api_key)
        module_path, class_name = spec["module"], spec["class"]
        mod = import_module(module_path)
        try:
            klass: Type[Any] = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - packaging error
            raise UnsupportedProviderError(
                f"Handle class '{class_name}' not found in '{module_path}' for provider '{tag.value}'"
            ) from exc

        log_event(
            get_logger("gateway.registry"),
            "registry.resolve",
            LogContext(provider=tag.value, model=config.model_id),
            base_url=params.base_url,
            handle=class_name,
        )
        return klass(params)

    @classmethod
    def build_params(
        cls, config: ModelConfiguration, tag: ProviderTag, api_key: Optional[str]
    ) -> AdapterParams:
        """Validate credential presence and normalize the endpoint for ``config``."""
        secret = api_key.strip() if isinstance(api_key, str) else ""
        if not secret:
            if tag.requires_credential:
                raise InvalidConfigurationError(
                    f'Model "{config.display_name}" is missing an API key. '
                    "Please add an API Key in Settings and assign it to this model."
                )
            secret = OLLAMA_PLACEHOLDER_API_KEY
        base_url = sanitize_base_url(config.base_url) or _default_base_url(tag)
        return AdapterParams(
            provider=tag,
            model_id=config.model_id,
            api_key=secret,
            base_url=base_url,
            timeout_seconds=get_timeout_config().http_timeout_seconds,
        )

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return supported provider tag values in declaration order."""
        return tuple(tag.value for tag in cls._PROVIDERS)

    @staticmethod
    def _coerce_tag(value: Any) -> Optional[ProviderTag]:
        if isinstance(value, ProviderTag):
            return value
        try:
            return ProviderTag(str(value).strip().lower())
        except ValueError:
            return None


_missing = set(ProviderTag) - set(ProviderRegistry._PROVIDERS)
if _missing:  # pragma: no cover - import-time exhaustiveness check
    raise RuntimeError(f"provider registry is missing handles for: {sorted(t.value for t in _missing)}")
del _missing


def resolve_handle(config: ModelConfiguration, api_key: Optional[str]) -> ModelHandle:
    """Module-level helper delegating to :meth:`ProviderRegistry.resolve`."""
    return ProviderRegistry.resolve(config, api_key)


__all__ = ["ProviderRegistry", "resolve_handle", "sanitize_base_url"]
