# src/strategies/memory.py — v1
"""Memory-augmented strategy — prompts carry a digest of recent analyses.

The history is a bounded buffer owned by this strategy; only successful
analyses are recorded. Verdicts of this strategy are cached by the
orchestrator (see ``cacheable``), so repeated emails skip the oracle.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel

from spamsentinel.core.validator import coerce_bool, text_or_default
from spamsentinel.strategies.base_strategy import BaseStrategy, load_prompt

if TYPE_CHECKING:
    from spamsentinel.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

HISTORY_EXCERPT_CHARS = 200
EMPTY_HISTORY = "(no previous analyses)"


class ContextualAnalysisSchema(BaseModel):
    is_spam: bool
    reason: str
    confidence: float
    threat_level: Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    pattern_similarity: float
    learning_feedback: str


class MemoryStrategy(BaseStrategy):
    """Classify with the context of previously analysed emails.

    Args:
        llm: Oracle client.
        history_size: Number of past analyses kept for the prompt.
        **kwargs: Forwarded to BaseStrategy.
    """

    def __init__(self, llm: BaseLLMClient, history_size: int = 20, **kwargs: Any) -> None:
        super().__init__(llm, **kwargs)
        self._history: deque[tuple[str, str]] = deque(maxlen=history_size)

    @property
    def name(self) -> str:
        return "memory"

    @property
    def description(self) -> str:
        return "Oracle call informed by recent analyses"

    @property
    def cacheable(self) -> bool:
        return True

    @property
    def history(self) -> list[tuple[str, str]]:
        """Snapshot of recorded (input, outcome) pairs, oldest first."""
        return list(self._history)

    async def invoke(self, text: str) -> dict[str, Any]:
        prompt = load_prompt("memory").format(
            history=self._format_history(),
            email_content=text,
        )
        raw = await self._ask(prompt, ContextualAnalysisSchema)
        self._remember(text, raw)
        return raw

    async def clear_memory(self) -> None:
        self._history.clear()
        logger.info("Memory strategy history cleared")

    def _remember(self, text: str, raw: dict[str, Any]) -> None:
        # Raises MalformedOutputError before anything is recorded.
        label = "SPAM" if coerce_bool(raw.get("is_spam"), strategy=self.name) else "LEGITIMATE"
        excerpt = f"Email analyzed: {text[:HISTORY_EXCERPT_CHARS]}..."
        outcome = f"Result: {label} - {text_or_default(raw.get('reason'))}"
        self._history.append((excerpt, outcome))

    def _format_history(self) -> str:
        if not self._history:
            return EMPTY_HISTORY
        return "\n".join(
            f"Email for analysis: {excerpt}\nSpam analysis: {outcome}"
            for excerpt, outcome in self._history
        )
