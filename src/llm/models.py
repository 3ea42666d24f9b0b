# src/llm/models.py — v3
"""Transport types exchanged with the oracle: chat messages and replies."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]


class Message(BaseModel):
    """One chat turn sent to the oracle."""

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role="user", content=content)


class LLMResponse(BaseModel):
    """Provider-neutral oracle reply.

    ``raw_response`` keeps the SDK object for debugging and is left out of
    serialization.
    """

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    raw_response: Any = Field(default=None, exclude=True, repr=False)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
