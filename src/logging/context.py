# src/logging/context.py — v2
"""Contextual logging support — attach request_id, fingerprint, strategy to log records.

Context variables are copied into every asyncio task at creation time, so
the strategy set inside one comparison task never leaks into its siblings.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)
_strategy: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "strategy", default=None
)

# Fingerprints are logged as a short prefix only.
FINGERPRINT_PREFIX_LEN = 12


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    fingerprint: str | None = None
    strategy: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        fingerprint=_fingerprint.get(),
        strategy=_strategy.get(),
    )


def set_request_context(request_id: str, fingerprint: str | None = None) -> None:
    """Set request-level context (called once per classify/compare call)."""
    _request_id.set(request_id)
    _fingerprint.set(fingerprint[:FINGERPRINT_PREFIX_LEN] if fingerprint else None)


def set_strategy_context(strategy: str | None) -> None:
    """Set the strategy currently being invoked."""
    _strategy.set(strategy)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _fingerprint.set(None)
    _strategy.set(None)
