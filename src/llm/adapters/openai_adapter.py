# src/llm/adapters/openai_adapter.py — v3
"""OpenAI chat-completions adapter.

``base_url`` points the client at any OpenAI-compatible endpoint, such as
GitHub Models. SDK-level retries are disabled; ``with_retry`` owns them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from spamsentinel.llm.base_client import BaseLLMClient
from spamsentinel.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """Adapter for OpenAI and OpenAI-compatible chat endpoints."""

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str = "",
        base_url: str | None = None,
        timeout_s: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, timeout_s)
        self._api_key = api_key
        self._base_url = base_url or None
        self.__client = None

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def _client(self):
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError("openai package required: pip install openai") from e
            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key or None,
                base_url=self._base_url,
                timeout=self._timeout_s,
                max_retries=0,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.1,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self._model,
            "messages": self.chat_messages(messages, system),
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if response_format is not None:
            request["response_format"] = _json_schema_format(response_format)

        reply, latency_ms = await self._timed(self._client.chat.completions.create(**request))

        usage = reply.usage
        return self._response(
            reply,
            content=reply.choices[0].message.content,
            latency_ms=latency_ms,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


def _json_schema_format(schema: type[BaseModel]) -> dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": schema.__name__, "schema": schema.model_json_schema()},
    }
