# src/strategies/multi_stage.py — v1
"""Multi-stage strategy — content analysis, threat assessment, final decision.

Each stage is a separate oracle call that sees the findings of the stages
before it. The intermediate findings are returned under ``analysis`` and
the threat stage's spam category under ``category``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, Field

from spamsentinel.strategies.base_strategy import BaseStrategy, load_prompt

logger = logging.getLogger(__name__)


class ContentAnalysisSchema(BaseModel):
    suspicious_keywords: list[str] = Field(default_factory=list)
    grammar_issues: float
    urgency_level: float
    financial_requests: bool
    personal_info_requests: bool


class ThreatAssessmentSchema(BaseModel):
    phishing_probability: float
    scam_probability: float
    malware_probability: float
    spam_category: Literal[
        "FINANCIAL",
        "PHARMACEUTICAL",
        "ROMANCE",
        "TECH_SUPPORT",
        "LOTTERY",
        "PHISHING",
        "LEGITIMATE",
    ]


class FinalDecisionSchema(BaseModel):
    is_spam: bool
    confidence: float
    threat_level: Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    reason: str
    recommended_action: str
    risk_factors: list[str] = Field(default_factory=list)


class MultiStageStrategy(BaseStrategy):
    """Three sequential oracle calls, each building on the previous ones."""

    @property
    def name(self) -> str:
        return "advanced"

    @property
    def description(self) -> str:
        return "Content analysis, threat assessment and final decision"

    async def invoke(self, text: str) -> dict[str, Any]:
        content = await self._ask(
            load_prompt("content_analysis").format(email_content=text),
            ContentAnalysisSchema,
            stage="content",
        )
        content_json = json.dumps(content, ensure_ascii=False)

        threat = await self._ask(
            load_prompt("threat_assessment").format(
                content_analysis=content_json,
                email_content=text,
            ),
            ThreatAssessmentSchema,
            stage="threat",
        )

        final = await self._ask(
            load_prompt("final_decision").format(
                content_analysis=content_json,
                threat_assessment=json.dumps(threat, ensure_ascii=False),
                email_content=text,
            ),
            FinalDecisionSchema,
            stage="decision",
        )
        logger.debug("Multi-stage analysis complete (3 oracle calls)")

        raw = dict(final)
        raw["analysis"] = {**content, **threat}
        raw["category"] = threat.get("spam_category")
        return raw
