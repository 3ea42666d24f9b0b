# src/strategies/registry.py — v1
"""Strategy registry — resolve strategy names to instances."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from spamsentinel.config.strategies import STRATEGY_REGISTRY
from spamsentinel.core.errors import UnknownStrategyError

if TYPE_CHECKING:
    from spamsentinel.llm.base_client import BaseLLMClient
    from spamsentinel.strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)


def available_strategies() -> list[str]:
    """Sorted names of registered strategies."""
    return sorted(STRATEGY_REGISTRY)


def create_strategy(name: str, llm: BaseLLMClient, **kwargs: Any) -> BaseStrategy:
    """Instantiate a registered strategy.

    Args:
        name: Strategy name (basic, advanced, memory).
        llm: Oracle client for the strategy.
        **kwargs: Strategy constructor arguments.

    Raises:
        UnknownStrategyError: If name is not registered.
    """
    class_path = STRATEGY_REGISTRY.get(name)
    if class_path is None:
        raise UnknownStrategyError(
            f"Unknown strategy: {name!r}. Available: {', '.join(available_strategies())}"
        )
    module_path, class_name = class_path.rsplit(".", 1)
    strategy_cls = getattr(importlib.import_module(module_path), class_name)
    logger.debug("Creating strategy %s (%s)", name, class_name)
    return strategy_cls(llm, **kwargs)
