# src/cache/models.py — v2
"""Cache domain models: CacheEntry, CacheStats."""

from __future__ import annotations

from pydantic import BaseModel, Field

from spamsentinel.core.models import Verdict


class CacheEntry(BaseModel):
    """Single cache entry linking a fingerprint to a verdict."""

    fingerprint: str
    verdict: Verdict
    created_at: float
    hit_count: int = Field(default=1, ge=1)


class CacheStats(BaseModel):
    """Snapshot of cache occupancy and hit accounting."""

    count: int = 0
    total_hits: int = 0
    hit_rate: float = 0.0
    oldest: float | None = None
    newest: float | None = None
    capacity: int
