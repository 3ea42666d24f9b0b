# src/api/facade.py — v2
"""Public API facade — build an orchestrator from settings and classify.

Usage:
    from spamsentinel.api.facade import classify, compare
    verdict = await classify(email_body)
    comparison = await compare(email_body)

The module-level functions share one lazily built orchestrator, so the
verdict cache and the memory strategy's history live as long as the
process.
"""

from __future__ import annotations

import logging
from typing import Callable

from spamsentinel.cache.models import CacheStats
from spamsentinel.cache.ttl_cache import BoundedTTLCache
from spamsentinel.config.settings import Settings
from spamsentinel.config.strategies import STRATEGY_REGISTRY
from spamsentinel.core.models import ComparisonResult, Verdict
from spamsentinel.llm.base_client import BaseLLMClient
from spamsentinel.llm.client_factory import create_llm_client
from spamsentinel.llm.config import resolve_llm
from spamsentinel.pipeline.orchestrator import ClassificationOrchestrator
from spamsentinel.strategies.base_strategy import BaseStrategy
from spamsentinel.strategies.registry import create_strategy

logger = logging.getLogger(__name__)

LLMFactory = Callable[[str], BaseLLMClient]

_default_orchestrator: ClassificationOrchestrator | None = None


def build_orchestrator(
    settings: Settings | None = None,
    llm_factory: LLMFactory | None = None,
) -> ClassificationOrchestrator:
    """Assemble strategies, cache and orchestrator from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        llm_factory: Callable(strategy_name) -> BaseLLMClient. Defaults to
            the provider routing configured in settings.

    Returns:
        Ready-to-use ClassificationOrchestrator.
    """
    settings = settings or Settings()
    factory = llm_factory or _settings_llm_factory(settings)

    strategies: list[BaseStrategy] = []
    for name in STRATEGY_REGISTRY:
        kwargs: dict[str, object] = {
            "temperature": settings.llm_default_temperature,
            "max_tokens": settings.llm_max_tokens,
        }
        if name == "memory":
            kwargs["history_size"] = settings.memory_history_size
        strategies.append(create_strategy(name, factory(name), **kwargs))

    cache = None
    if settings.cache_enabled:
        cache = BoundedTTLCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    logger.info(
        "Orchestrator ready: strategies=%s compare=%s cache=%s",
        ",".join(STRATEGY_REGISTRY), settings.compare_strategies,
        "on" if cache is not None else "off",
    )
    return ClassificationOrchestrator(
        strategies=strategies,
        cache=cache,
        default_strategy=settings.default_strategy,
        compare_strategies=settings.compare_strategies_list,
        max_canonical_chars=settings.max_canonical_chars,
        batch_concurrency=settings.batch_concurrency,
    )


def _settings_llm_factory(settings: Settings) -> LLMFactory:
    """One client per distinct provider:model, shared between strategies."""
    clients: dict[str, BaseLLMClient] = {}

    def factory(strategy: str) -> BaseLLMClient:
        assignment = resolve_llm(strategy, settings)
        if assignment.key not in clients:
            clients[assignment.key] = create_llm_client(
                assignment.provider, assignment.model, settings
            )
        logger.debug("Strategy %s -> %s (%s)", strategy, assignment.key, assignment.source)
        return clients[assignment.key]

    return factory


def get_orchestrator(settings: Settings | None = None) -> ClassificationOrchestrator:
    """Return the process-wide orchestrator, building it on first use."""
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = build_orchestrator(settings)
    return _default_orchestrator


def reset_orchestrator() -> None:
    """Forget the process-wide orchestrator (next call rebuilds it)."""
    global _default_orchestrator
    _default_orchestrator = None


async def classify(text: str, strategy: str | None = None) -> Verdict:
    """Classify text with one strategy (fail-safe verdict on failure)."""
    return await get_orchestrator().classify(text, strategy)


async def compare(text: str) -> ComparisonResult:
    """Run all comparison strategies and return their consensus."""
    return await get_orchestrator().compare(text)


def cache_stats() -> CacheStats:
    return get_orchestrator().cache_stats()


def clear_cache() -> None:
    get_orchestrator().clear_cache()


async def clear_strategy_memory() -> None:
    await get_orchestrator().clear_strategy_memory()
