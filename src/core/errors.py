# src/core/errors.py — v1
"""Exception hierarchy for classification failures."""

from __future__ import annotations


class SpamSentinelError(Exception):
    """Base class for all spamsentinel errors."""


class StrategyError(SpamSentinelError):
    """A classification strategy could not produce a verdict."""

    def __init__(self, strategy: str, message: str) -> None:
        self.strategy = strategy
        super().__init__(f"Strategy '{strategy}': {message}")


class MalformedOutputError(StrategyError):
    """Oracle output could not be coerced into a verdict."""


class UnknownStrategyError(SpamSentinelError, ValueError):
    """Raised when a strategy name is not registered."""
