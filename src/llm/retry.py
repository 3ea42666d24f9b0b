# src/llm/retry.py — v3
"""Retry policy with exponential backoff for oracle calls.

Failures are sorted into error classes. A class with a ``RetryConfig``
is retried up to its budget; any other class (token_limit, unknown)
fails on the first attempt. Strategies parse the oracle's JSON inside the
retried call, so unparsable output counts as a ``parse_error``.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from spamsentinel.core.errors import MalformedOutputError

logger = logging.getLogger(__name__)


class LLMRetryExhausted(Exception):
    """An oracle call failed for good: not retryable, or out of retries."""

    def __init__(self, operation: str, error_type: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"'{operation}' gave up after {attempts} attempt(s) [{error_type}]: {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Backoff budget for one error class."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (0-based).

        Jitter scales the delay by a random factor in [0.5, 1.5).
        """
        seconds = self.base_delay_s * self.backoff_factor ** attempt
        if self.jitter:
            seconds *= random.uniform(0.5, 1.5)  # noqa: S311
        return seconds


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=3, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=2, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=3, base_delay_s=5.0),
    "parse_error": RetryConfig(max_retries=2, base_delay_s=1.0),
}

# Checked in order against (lowercased message, lowercased class name).
_MESSAGE_RULES: list[tuple[str, Callable[[str, str], bool]]] = [
    ("rate_limit", lambda msg, name: "429" in msg or "ratelimit" in name or "rate limit" in msg),
    ("timeout", lambda msg, name: "timeout" in name or "timeout" in msg or "timed out" in msg),
    ("server_error", lambda msg, name: "server" in name or any(
        code in msg for code in ("500", "502", "503", "504"))),
    ("token_limit", lambda msg, name: "token" in msg and ("limit" in msg or "exceed" in msg)),
]


def classify_error(error: Exception) -> str:
    """Map an exception to its error class name."""
    if isinstance(error, (json.JSONDecodeError, MalformedOutputError)):
        return "parse_error"

    # Provider SDK errors carry the HTTP status.
    status = getattr(error, "status_code", None)
    if status == 429:
        return "rate_limit"
    if isinstance(status, int) and status >= 500:
        return "server_error"

    msg, name = str(error).lower(), type(error).__name__.lower()
    for error_type, matches in _MESSAGE_RULES:
        if matches(msg, name):
            return error_type
    return "unknown"


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "unknown",
    retry_configs: dict[str, RetryConfig] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Await ``fn(*args, **kwargs)``, retrying per error class.

    ``retry_configs={}`` disables retries entirely; ``None`` selects
    ``DEFAULT_RETRY_CONFIGS``.

    Raises:
        LLMRetryExhausted: If the error is not retryable or retries run out.
    """
    configs = DEFAULT_RETRY_CONFIGS if retry_configs is None else retry_configs

    for attempt in itertools.count(1):
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)
            config = configs.get(error_type)
            if config is None or attempt > config.max_retries:
                raise LLMRetryExhausted(operation, error_type, attempt, e) from e

            wait = config.delay(attempt - 1)
            logger.warning(
                "'%s' %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempt, config.max_retries, wait,
            )
            await sleep(wait)
