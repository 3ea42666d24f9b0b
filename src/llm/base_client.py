# src/llm/base_client.py — v3
"""Oracle transport: the abstract chat client every strategy talks to.

Concrete adapters only translate a request into their SDK call and the SDK
reply back into an ``LLMResponse``. Message flattening and call timing live
here so each adapter stays a thin shim.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, TypeVar

from pydantic import BaseModel

from spamsentinel.llm.models import LLMResponse, Message

T = TypeVar("T")


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    def __init__(self, model: str, timeout_s: float | None = None) -> None:
        self._model = model
        self._timeout_s = timeout_s

    @property
    def model(self) -> str:
        return self._model

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic, ollama)."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Run one chat completion.

        When response_format is given, providers that support it are asked
        for JSON matching the model's schema. The content is still returned
        as text and must be parsed and validated by the caller.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.provider_name}:{self._model})"

    # --- Helpers for adapters ---

    @staticmethod
    def chat_messages(messages: list[Message], system: str | None = None) -> list[dict[str, str]]:
        """Flatten an optional system prompt plus messages into role/content dicts."""
        flat = [{"role": "system", "content": system}] if system else []
        flat.extend({"role": m.role, "content": m.content} for m in messages)
        return flat

    async def _timed(self, call: Awaitable[T]) -> tuple[T, int]:
        """Await a provider call, returning its result and latency in ms."""
        start = time.monotonic()
        result = await call
        return result, int((time.monotonic() - start) * 1000)

    def _response(
        self,
        raw: Any,
        content: str | None,
        latency_ms: int,
        input_tokens: int | None = 0,
        output_tokens: int | None = 0,
        model: str | None = None,
    ) -> LLMResponse:
        return LLMResponse(
            content=content or "",
            input_tokens=input_tokens or 0,
            output_tokens=output_tokens or 0,
            model=model or self._model,
            provider=self.provider_name,
            latency_ms=latency_ms,
            raw_response=raw,
        )
