# src/core/models.py — v1
"""Core domain models: Verdict, AdvancedAnalysis, ConsensusResult, ComparisonResult.

Verdicts are produced only by the output validator, so numeric fields are
always inside their declared ranges.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ThreatLevel = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
SpamCategory = Literal[
    "FINANCIAL",
    "PHARMACEUTICAL",
    "ROMANCE",
    "TECH_SUPPORT",
    "LOTTERY",
    "PHISHING",
    "LEGITIMATE",
]

THREAT_LEVELS: tuple[str, ...] = ("LOW", "MEDIUM", "HIGH", "CRITICAL")
SPAM_CATEGORIES: tuple[str, ...] = (
    "FINANCIAL",
    "PHARMACEUTICAL",
    "ROMANCE",
    "TECH_SUPPORT",
    "LOTTERY",
    "PHISHING",
    "LEGITIMATE",
)

EMPTY_INPUT_REASON = "Empty email cannot be classified as spam"
FAIL_SAFE_REASON = "analysis failed, defaulting to safe classification"


class AdvancedAnalysis(BaseModel):
    """Intermediate findings of the multi-stage strategy."""

    suspicious_keywords: list[str] = Field(default_factory=list)
    grammar_issues: float = Field(default=0.0, ge=0.0, le=10.0)
    urgency_level: float = Field(default=0.0, ge=0.0, le=10.0)
    has_financial_requests: bool = False
    has_personal_info_requests: bool = False
    phishing_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    scam_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    malware_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    spam_category: SpamCategory = "LEGITIMATE"


class Verdict(BaseModel):
    """Normalized classification result for one text and one strategy."""

    is_spam: bool
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)
    threat_level: ThreatLevel = "LOW"
    pattern_similarity: float | None = Field(default=None, ge=0.0, le=1.0)
    learning_feedback: str | None = None
    category: str | None = None
    categories: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    recommended_action: str | None = None
    analysis: AdvancedAnalysis | None = None
    strategy: str = ""
    from_cache: bool = False
    analysis_time_ms: int = 0


class ConsensusResult(BaseModel):
    """Aggregate decision over several strategy verdicts."""

    is_spam: bool
    confidence: float = Field(ge=0.0, le=1.0)
    agreement: float = Field(ge=0.0, le=1.0)


class ComparisonResult(BaseModel):
    """Per-strategy verdicts plus their consensus.

    ``fail_safe`` is populated only when no strategy produced a verdict.
    """

    per_strategy: dict[str, Verdict | None] = Field(default_factory=dict)
    consensus: ConsensusResult
    fail_safe: Verdict | None = None

    @property
    def available(self) -> list[Verdict]:
        """Verdicts that contributed to the consensus."""
        return [v for v in self.per_strategy.values() if v is not None]


def empty_input_verdict(strategy: str = "") -> Verdict:
    """Fixed verdict for blank input; no oracle call is made."""
    return Verdict(
        is_spam=False,
        reason=EMPTY_INPUT_REASON,
        confidence=1.0,
        threat_level="LOW",
        strategy=strategy,
    )


def fail_safe_verdict(strategy: str = "") -> Verdict:
    """Conservative verdict used when classification cannot complete."""
    return Verdict(
        is_spam=False,
        reason=FAIL_SAFE_REASON,
        confidence=0.5,
        threat_level="LOW",
        strategy=strategy,
    )
