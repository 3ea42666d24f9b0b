# src/core/consensus.py — v1
"""Reduce several strategy verdicts to one consensus decision."""

from __future__ import annotations

from collections.abc import Sequence

from spamsentinel.core.models import ConsensusResult, Verdict

# Consensus reported when no strategy produced a verdict.
NO_CONSENSUS = ConsensusResult(is_spam=False, confidence=0.5, agreement=0.0)


def compute_consensus(verdicts: Sequence[Verdict]) -> ConsensusResult:
    """Strict-majority vote with mean confidence and agreement ratio.

    Ties resolve to not-spam. Agreement is the share of verdicts on the
    majority side: 1.0 when unanimous, 0.5 on an even split.

    Raises:
        ValueError: If verdicts is empty.
    """
    total = len(verdicts)
    if total == 0:
        raise ValueError("compute_consensus requires at least one verdict")

    spam_count = sum(1 for v in verdicts if v.is_spam)
    mean_confidence = sum(v.confidence for v in verdicts) / total

    return ConsensusResult(
        is_spam=spam_count > total / 2,
        confidence=min(1.0, max(0.0, mean_confidence)),
        agreement=max(spam_count, total - spam_count) / total,
    )
