# src/llm/adapters/anthropic_adapter.py — v4
"""Anthropic Messages API adapter.

Structured output is requested by forcing a single tool whose
input schema is the response model; the tool input is returned as JSON text.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel

from spamsentinel.llm.base_client import BaseLLMClient
from spamsentinel.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

TOOL_NAME = "structured_output"


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout_s: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(model, timeout_s)
        self._api_key = api_key
        self.__client = None

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def _client(self):
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install anthropic"
                ) from e
            self.__client = anthropic.AsyncAnthropic(
                api_key=self._api_key or None,
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
        # System text is a top-level parameter here, never a turn.
        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [turn for turn in self.chat_messages(messages) if turn["role"] != "system"],
        }
        if system:
            request["system"] = system
        if response_format is not None:
            request["tools"] = [{
                "name": TOOL_NAME,
                "description": f"Report the {response_format.__name__} for the email",
                "input_schema": response_format.model_json_schema(),
            }]
            request["tool_choice"] = {"type": "tool", "name": TOOL_NAME}

        reply, latency_ms = await self._timed(self._client.messages.create(**request))

        return self._response(
            reply,
            content=_reply_text(reply.content, want_tool=response_format is not None),
            latency_ms=latency_ms,
            input_tokens=reply.usage.input_tokens,
            output_tokens=reply.usage.output_tokens,
            model=reply.model,
        )


def _reply_text(blocks: list[Any], want_tool: bool) -> str:
    """First forced-tool input (as JSON) or text block in the reply."""
    for block in blocks:
        kind = getattr(block, "type", None)
        if want_tool and kind == "tool_use":
            return json.dumps(block.input)
        if kind == "text":
            return block.text
    logger.debug("Anthropic reply carried no usable content block")
    return ""
