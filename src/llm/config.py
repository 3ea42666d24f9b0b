# src/llm/config.py — v3
"""Which ``provider:model`` answers for each strategy.

Candidates are tried in order and the first complete one wins:
  1. strategy   LLM_<STRATEGY>=anthropic:claude-sonnet-4-20250514
  2. default    LLM_DEFAULT_PROVIDER + LLM_DEFAULT_MODEL
  3. fallback   openai:gpt-4o
"""

from __future__ import annotations

from dataclasses import dataclass

from spamsentinel.config.settings import Settings
from spamsentinel.config.strategies import STRATEGY_REGISTRY

_FALLBACK = ("openai", "gpt-4o")


@dataclass(frozen=True)
class LLMAssignment:
    """Provider and model chosen for a strategy, and which level chose it."""

    provider: str
    model: str
    source: str

    @property
    def key(self) -> str:
        return f"{self.provider}:{self.model}"


def _parse_assignment(value: str) -> tuple[str, str] | None:
    """Split ``provider:model``; the model may itself contain colons."""
    provider, sep, model = (value or "").partition(":")
    provider, model = provider.strip(), model.strip()
    if not sep or not provider or not model:
        return None
    return provider, model


def resolve_llm(strategy: str, settings: Settings) -> LLMAssignment:
    """Walk the cascade for ``strategy``. Unknown strategies skip level 1."""
    candidates: list[tuple[str, tuple[str, str] | None]] = [
        ("strategy", _parse_assignment(getattr(settings, f"llm_{strategy}", ""))),
        ("default", (settings.llm_default_provider, settings.llm_default_model)),
    ]
    for source, pair in candidates:
        if pair and all(pair):
            return LLMAssignment(provider=pair[0], model=pair[1], source=source)
    return LLMAssignment(provider=_FALLBACK[0], model=_FALLBACK[1], source="fallback")


def resolve_all(settings: Settings) -> dict[str, LLMAssignment]:
    """Assignments for every registered strategy, keyed by name."""
    return {name: resolve_llm(name, settings) for name in sorted(STRATEGY_REGISTRY)}
