# src/strategies/single_pass.py — v1
"""Single-pass strategy — one oracle call returns the whole verdict."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from spamsentinel.strategies.base_strategy import BaseStrategy, load_prompt


class SpamAnalysisSchema(BaseModel):
    """Response shape requested from the oracle."""

    is_spam: bool
    reason: str
    confidence: float
    threat_level: Literal["LOW", "MEDIUM", "HIGH"]
    categories: list[str] = Field(default_factory=list)


class SinglePassStrategy(BaseStrategy):
    """Classify with a single structured oracle call."""

    @property
    def name(self) -> str:
        return "basic"

    @property
    def description(self) -> str:
        return "Single structured oracle call"

    async def invoke(self, text: str) -> dict[str, Any]:
        prompt = load_prompt("single_pass").format(email_content=text)
        return await self._ask(prompt, SpamAnalysisSchema)
