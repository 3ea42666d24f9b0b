# tests/unit/tracking/test_stats_aggregator.py — v2
"""Tests for tracking/stats_aggregator.py — running verdict statistics."""

from __future__ import annotations

import pytest

from spamsentinel.core.models import Verdict
from spamsentinel.tracking.models import VerdictSummary
from spamsentinel.tracking.stats_aggregator import VerdictStats


def _v(is_spam: bool, confidence: float, threat: str = "LOW", cached: bool = False) -> Verdict:
    return Verdict(
        is_spam=is_spam, reason="r", confidence=confidence,
        threat_level=threat, from_cache=cached,
    )


class TestVerdictStats:
    def test_empty(self):
        assert VerdictStats().summary() == VerdictSummary()

    def test_summary(self):
        stats = VerdictStats([
            _v(True, 0.9, "HIGH"),
            _v(True, 0.7, "HIGH", cached=True),
            _v(False, 0.8),
            _v(False, 0.6),
        ])
        s = stats.summary()
        assert s.total == 4
        assert s.spam_count == 2
        assert s.ham_count == 2
        assert s.spam_rate == 50.0
        assert s.average_confidence == pytest.approx(0.75)
        assert s.from_cache_count == 1
        assert s.by_threat_level == {"HIGH": 2, "LOW": 2}

    def test_add_and_len(self):
        stats = VerdictStats()
        stats.add(_v(True, 1.0))
        assert len(stats) == 1
        assert stats.summary().spam_rate == 100.0

    def test_reset(self):
        stats = VerdictStats([_v(True, 1.0)])
        stats.reset()
        assert len(stats) == 0
        assert stats.summary().total == 0
