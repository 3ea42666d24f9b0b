# src/llm/client_factory.py — v4
"""Build oracle clients from a provider name.

The facade calls ``create_llm_client`` once per distinct ``provider:model``
resolved by llm/config.py. Adapters are imported lazily so an unused
provider SDK never has to be installed.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from spamsentinel.config.settings import Settings
from spamsentinel.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "spamsentinel.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "spamsentinel.llm.adapters.anthropic_adapter.AnthropicAdapter",
    "ollama": "spamsentinel.llm.adapters.ollama_adapter.OllamaAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: Any,
) -> BaseLLMClient:
    """Instantiate the adapter registered for ``provider``.

    Connection details (keys, endpoints, timeout) come from ``settings``;
    explicit keyword arguments take precedence over them.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    class_path = _PROVIDER_REGISTRY.get(provider)
    if class_path is None:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}"
        )

    init_kwargs = _connection_kwargs(provider, settings) if settings is not None else {}
    init_kwargs.update(kwargs)
    init_kwargs["model"] = model

    logger.debug("Creating %s client for model %s", provider, model)
    return _import_class(class_path)(**init_kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register an extra adapter by dotted class path."""
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def available_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)


def _connection_kwargs(provider: str, settings: Settings) -> dict[str, Any]:
    per_provider: dict[str, dict[str, Any]] = {
        "openai": {
            "api_key": settings.openai_api_key,
            "base_url": settings.openai_base_url or None,
        },
        "anthropic": {"api_key": settings.anthropic_api_key},
        "ollama": {"host": settings.ollama_base_url},
    }
    return {"timeout_s": settings.llm_timeout_s, **per_provider.get(provider, {})}


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    return getattr(importlib.import_module(module_path), class_name)
