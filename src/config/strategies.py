# src/config/strategies.py — v1
"""Declarative strategy registry configuration.

Maps each classification strategy name to the class implementing it,
imported lazily by strategies/registry.py.
"""

from __future__ import annotations

# Strategy name -> fully qualified class path.
STRATEGY_REGISTRY: dict[str, str] = {
    "basic": "spamsentinel.strategies.single_pass.SinglePassStrategy",
    "advanced": "spamsentinel.strategies.multi_stage.MultiStageStrategy",
    "memory": "spamsentinel.strategies.memory.MemoryStrategy",
}

DEFAULT_STRATEGY = "basic"
