# tests/conftest.py — v2
"""Shared test fixtures.

Provides a mock LLM client, scripted stub strategies and a manual clock.
No external dependencies — all oracle calls are mocked.
"""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from spamsentinel.core.models import Verdict
from spamsentinel.llm.models import LLMResponse
from spamsentinel.logging.context import clear_context
from spamsentinel.strategies.base_strategy import BaseStrategy


class StubStrategy(BaseStrategy):
    """Strategy returning scripted payloads and recording what it saw.

    Each item of ``outcomes`` is either a raw payload dict or an exception
    instance to raise. The last item repeats once the script runs out.
    """

    def __init__(
        self,
        name: str,
        outcomes: list[Any],
        cacheable: bool = False,
    ) -> None:
        super().__init__(llm=AsyncMock())
        self._name = name
        self._outcomes = list(outcomes)
        self._cacheable = cacheable
        self.seen: list[str] = []
        self.cleared = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"stub {self._name}"

    @property
    def cacheable(self) -> bool:
        return self._cacheable

    async def invoke(self, text: str) -> dict[str, Any]:
        self.seen.append(text)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def clear_memory(self) -> None:
        self.cleared += 1


class ManualClock:
    """Controllable time source for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === FIXTURES: Payloads ===


@pytest.fixture
def spam_payload() -> dict[str, Any]:
    return {
        "is_spam": True,
        "reason": "Urgent prize claim with a payment link",
        "confidence": 0.92,
        "threat_level": "HIGH",
        "categories": ["LOTTERY"],
    }


@pytest.fixture
def ham_payload() -> dict[str, Any]:
    return {
        "is_spam": False,
        "reason": "Ordinary meeting follow-up",
        "confidence": 0.85,
        "threat_level": "LOW",
    }


@pytest.fixture
def sample_verdict() -> Verdict:
    return Verdict(
        is_spam=True,
        reason="Lottery scam",
        confidence=0.9,
        threat_level="HIGH",
        strategy="memory",
    )


# === FIXTURES: Stub strategies ===


@pytest.fixture
def make_strategy() -> Callable[..., StubStrategy]:
    """Factory: make_strategy(name, *outcomes, cacheable=False)."""

    def _make(name: str, *outcomes: Any, cacheable: bool = False) -> StubStrategy:
        return StubStrategy(name, list(outcomes), cacheable=cacheable)

    return _make


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


# === FIXTURES: Mock LLM ===


def make_llm_response(content: str | dict[str, Any]) -> LLMResponse:
    if not isinstance(content, str):
        content = json.dumps(content)
    return LLMResponse(
        content=content,
        input_tokens=120,
        output_tokens=40,
        model="gpt-4o",
        provider="mock",
        latency_ms=300,
    )


@pytest.fixture
def mock_llm_client() -> Callable[..., AsyncMock]:
    """Factory: mock_llm_client(*contents) answering each call in turn."""

    def _make(*contents: str | dict[str, Any]) -> AsyncMock:
        client = AsyncMock()
        client.complete = AsyncMock(side_effect=[make_llm_response(c) for c in contents])
        client.provider_name = "mock"
        return client

    return _make


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_context()
