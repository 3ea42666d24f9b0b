# src/llm/adapters/ollama_adapter.py — v3
"""Ollama adapter for locally hosted models.

A fresh ``ollama.AsyncClient`` is opened per call; structured output maps
to Ollama's JSON mode since local models do not take a schema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from spamsentinel.llm.base_client import BaseLLMClient
from spamsentinel.llm.models import LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    """Adapter for an Ollama server."""

    def __init__(
        self,
        model: str = "llama3",
        host: str = "http://localhost:11434",
        timeout_s: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, timeout_s)
        self._host = host

    @property
    def provider_name(self) -> str:
        return "ollama"

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host, timeout=self._timeout_s)
        request: dict[str, Any] = {
            "model": self._model,
            "messages": self.chat_messages(messages, system),
            "options": {"num_predict": max_tokens, "temperature": temperature},
        }
        if response_format is not None:
            request["format"] = "json"

        reply, latency_ms = await self._timed(client.chat(**request))

        return self._response(
            reply,
            content=reply["message"]["content"],
            latency_ms=latency_ms,
            input_tokens=reply.get("prompt_eval_count"),
            output_tokens=reply.get("eval_count"),
        )
