# src/strategies/base_strategy.py — v1
"""Classification strategy interface.

A strategy turns canonical email text into a raw, untrusted mapping of
verdict fields by making one or more oracle calls. It may raise on any
failure; the orchestrator owns fail-safe handling and validation.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from spamsentinel.core.errors import MalformedOutputError
from spamsentinel.llm.models import Message
from spamsentinel.llm.retry import RetryConfig, with_retry

if TYPE_CHECKING:
    from spamsentinel.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"

SYSTEM_PROMPT = (
    "You are an expert in cyber security and spam detection. "
    "Respond only with a valid JSON object."
)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_prompt_cache: dict[str, str] = {}


def load_prompt(name: str) -> str:
    """Read a prompt template from the prompts directory (cached)."""
    if name not in _prompt_cache:
        _prompt_cache[name] = (PROMPTS_DIR / f"{name}.txt").read_text(encoding="utf-8")
    return _prompt_cache[name]


def parse_json_object(content: str) -> Any:
    """Parse oracle text as JSON, tolerating code fences and surrounding prose.

    Raises:
        json.JSONDecodeError: If no JSON value can be recovered.
    """
    text = content.strip()
    if text.startswith("```"):
        lines = [ln for ln in text.split("\n") if not ln.strip().startswith("```")]
        text = "\n".join(lines).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(text)
        if match is None:
            raise
        return json.loads(match.group(0))


class BaseStrategy(ABC):
    """Standard interface for all classification strategies.

    Args:
        llm: Oracle client used for every call this strategy makes.
        temperature: Sampling temperature for oracle calls.
        max_tokens: Response token budget per oracle call.
        retry_configs: Override of the default retry policy.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        temperature: float = 0.1,
        max_tokens: int = 500,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._retry_configs = retry_configs

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique strategy identifier (e.g. 'basic', 'memory')."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this strategy does."""

    @property
    def cacheable(self) -> bool:
        """Whether the orchestrator should cache this strategy's verdicts."""
        return False

    @abstractmethod
    async def invoke(self, text: str) -> dict[str, Any]:
        """Classify canonical text.

        Returns:
            Raw verdict fields as returned by the oracle (unvalidated).
        """

    async def clear_memory(self) -> None:
        """Drop any internal state kept between calls."""
        return None

    async def _ask(
        self,
        prompt: str,
        schema: type[BaseModel] | None = None,
        stage: str | None = None,
    ) -> dict[str, Any]:
        """One oracle call returning a JSON object, retried on transient errors."""
        operation = f"{self.name}:{stage}" if stage else self.name
        return await with_retry(
            self._complete_json,
            prompt,
            schema,
            operation=operation,
            retry_configs=self._retry_configs,
        )

    async def _complete_json(
        self, prompt: str, schema: type[BaseModel] | None
    ) -> dict[str, Any]:
        response = await self._llm.complete(
            messages=[Message.user(prompt)],
            system=SYSTEM_PROMPT,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            response_format=schema,
        )
        parsed = parse_json_object(response.content)
        if not isinstance(parsed, dict):
            raise MalformedOutputError(
                self.name, f"expected a JSON object, got {type(parsed).__name__}"
            )
        logger.debug(
            "Oracle answered in %dms (%d tokens)",
            response.latency_ms, response.total_tokens,
        )
        return parsed
