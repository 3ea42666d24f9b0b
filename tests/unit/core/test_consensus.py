# tests/unit/core/test_consensus.py — v1
"""Tests for core/consensus.py — majority vote over verdicts."""

from __future__ import annotations

import pytest

from spamsentinel.core.consensus import NO_CONSENSUS, compute_consensus
from spamsentinel.core.models import Verdict


def _v(is_spam: bool, confidence: float) -> Verdict:
    return Verdict(is_spam=is_spam, reason="r", confidence=confidence)


class TestComputeConsensus:
    def test_two_of_three_spam(self):
        result = compute_consensus([_v(True, 0.9), _v(True, 0.8), _v(False, 0.6)])
        assert result.is_spam is True
        assert result.confidence == pytest.approx(0.7667, abs=1e-4)
        assert result.agreement == pytest.approx(2 / 3)

    def test_unanimous(self):
        result = compute_consensus([_v(False, 0.9), _v(False, 0.7)])
        assert result.is_spam is False
        assert result.agreement == 1.0
        assert result.confidence == pytest.approx(0.8)

    def test_tie_is_not_spam(self):
        result = compute_consensus([_v(True, 0.9), _v(False, 0.9)])
        assert result.is_spam is False
        assert result.agreement == 0.5

    def test_single_verdict(self):
        result = compute_consensus([_v(True, 0.4)])
        assert result.is_spam is True
        assert result.confidence == pytest.approx(0.4)
        assert result.agreement == 1.0

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="at least one"):
            compute_consensus([])


class TestNoConsensus:
    def test_values(self):
        assert NO_CONSENSUS.is_spam is False
        assert NO_CONSENSUS.confidence == 0.5
        assert NO_CONSENSUS.agreement == 0.0
