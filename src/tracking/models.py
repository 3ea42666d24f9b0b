# src/tracking/models.py — v2
"""Tracking models: VerdictSummary."""

from __future__ import annotations

from pydantic import BaseModel, Field


class VerdictSummary(BaseModel):
    """Aggregate counts over a set of verdicts."""

    total: int = 0
    spam_count: int = 0
    ham_count: int = 0
    spam_rate: float = Field(default=0.0, description="Percentage of spam verdicts (0-100)")
    average_confidence: float = 0.0
    from_cache_count: int = 0
    by_threat_level: dict[str, int] = Field(default_factory=dict)
