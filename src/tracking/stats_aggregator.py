# src/tracking/stats_aggregator.py — v2
"""Running statistics over classification verdicts.

Kept in memory only; counters are updated synchronously so concurrent
asyncio tasks never interleave inside an update.
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from collections.abc import Iterable

from spamsentinel.core.models import Verdict
from spamsentinel.tracking.models import VerdictSummary

logger = logging.getLogger(__name__)


class VerdictStats:
    """Accumulate verdict counts and confidence totals."""

    def __init__(self, verdicts: Iterable[Verdict] = ()) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._spam = 0
        self._confidence_sum = 0.0
        self._from_cache = 0
        self._threat_levels: Counter[str] = Counter()
        for verdict in verdicts:
            self.add(verdict)

    def add(self, verdict: Verdict) -> None:
        with self._lock:
            self._total += 1
            self._spam += int(verdict.is_spam)
            self._confidence_sum += verdict.confidence
            self._from_cache += int(verdict.from_cache)
            self._threat_levels[verdict.threat_level] += 1

    def summary(self) -> VerdictSummary:
        with self._lock:
            total = self._total
            if total == 0:
                return VerdictSummary()
            return VerdictSummary(
                total=total,
                spam_count=self._spam,
                ham_count=total - self._spam,
                spam_rate=self._spam / total * 100,
                average_confidence=self._confidence_sum / total,
                from_cache_count=self._from_cache,
                by_threat_level=dict(self._threat_levels),
            )

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._spam = 0
            self._confidence_sum = 0.0
            self._from_cache = 0
            self._threat_levels.clear()
        logger.debug("Verdict statistics reset")

    def __len__(self) -> int:
        return self._total
