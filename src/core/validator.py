# src/core/validator.py — v1
"""Output validator — clamp and repair untrusted oracle fields.

Every field coming back from an oracle call is treated as optionally
absent or malformed. Numeric scores are clamped, enumerations fall back
to a safe default, and free text gets a placeholder. Only ``is_spam`` is
mandatory: without it the payload is schema-violating.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from spamsentinel.core.errors import MalformedOutputError
from spamsentinel.core.models import (
    SPAM_CATEGORIES,
    THREAT_LEVELS,
    AdvancedAnalysis,
    Verdict,
)

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Analysis performed"
DEFAULT_CONFIDENCE = 0.5
DEFAULT_THREAT_LEVEL = "LOW"

_TRUE_STRINGS = {"true", "yes", "spam", "1"}
_FALSE_STRINGS = {"false", "no", "not spam", "not-spam", "ham", "legitimate", "0"}


def _to_finite_float(value: Any) -> float | None:
    """Return value as a finite float, or None if it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_range(value: Any, low: float, high: float, default: float) -> float:
    """Clamp a numeric value into [low, high]; non-numbers yield default."""
    number = _to_finite_float(value)
    if number is None:
        return default
    return min(high, max(low, number))


def clamp_unit(value: Any, default: float = DEFAULT_CONFIDENCE) -> float:
    """Clamp a numeric value into [0, 1]; non-numbers yield default."""
    return clamp_range(value, 0.0, 1.0, default)


def coerce_enum(value: Any, allowed: Iterable[str], default: str) -> str:
    """Return value if it names a member of allowed, else default.

    Matching is case-insensitive and ignores surrounding whitespace.
    """
    if not isinstance(value, str):
        return default
    candidate = value.strip().upper()
    return candidate if candidate in set(allowed) else default


def coerce_bool(value: Any, field: str = "is_spam", strategy: str = "unknown") -> bool:
    """Coerce an oracle boolean.

    Raises:
        MalformedOutputError: If the value cannot be read as a boolean.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise MalformedOutputError(strategy, f"field '{field}' is not a boolean: {value!r}")


def text_or_default(value: Any, default: str = DEFAULT_REASON) -> str:
    """Return stripped text, or default when absent or blank."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def string_list(value: Any) -> list[str]:
    """Keep the non-blank string items of a list; anything else is empty."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def build_analysis(raw: Mapping[str, Any]) -> AdvancedAnalysis:
    """Validate the intermediate findings of the multi-stage strategy."""
    return AdvancedAnalysis(
        suspicious_keywords=string_list(raw.get("suspicious_keywords")),
        grammar_issues=clamp_range(raw.get("grammar_issues"), 0.0, 10.0, 0.0),
        urgency_level=clamp_range(raw.get("urgency_level"), 0.0, 10.0, 0.0),
        has_financial_requests=raw.get("financial_requests") is True,
        has_personal_info_requests=raw.get("personal_info_requests") is True,
        phishing_probability=clamp_unit(raw.get("phishing_probability"), 0.0),
        scam_probability=clamp_unit(raw.get("scam_probability"), 0.0),
        malware_probability=clamp_unit(raw.get("malware_probability"), 0.0),
        spam_category=coerce_enum(raw.get("spam_category"), SPAM_CATEGORIES, "LEGITIMATE"),
    )


def build_verdict(raw: Any, strategy: str) -> Verdict:
    """Turn a raw oracle payload into a validated Verdict.

    Args:
        raw: Parsed oracle output (expected to be a mapping).
        strategy: Name of the strategy that produced it.

    Returns:
        Verdict with every field inside its declared range.

    Raises:
        MalformedOutputError: If raw is not a mapping or lacks a usable is_spam.
    """
    if not isinstance(raw, Mapping):
        raise MalformedOutputError(strategy, f"expected an object, got {type(raw).__name__}")
    if "is_spam" not in raw:
        raise MalformedOutputError(strategy, "missing field 'is_spam'")

    is_spam = coerce_bool(raw["is_spam"], strategy=strategy)

    pattern_similarity = None
    if "pattern_similarity" in raw:
        pattern_similarity = clamp_unit(raw.get("pattern_similarity"), 0.0)

    learning_feedback = None
    if "learning_feedback" in raw:
        learning_feedback = text_or_default(raw.get("learning_feedback"))

    analysis = None
    if isinstance(raw.get("analysis"), Mapping):
        analysis = build_analysis(raw["analysis"])

    category = raw.get("category")
    if analysis is not None and not isinstance(category, str):
        category = analysis.spam_category

    recommended_action = raw.get("recommended_action")

    verdict = Verdict(
        is_spam=is_spam,
        reason=text_or_default(raw.get("reason")),
        confidence=clamp_unit(raw.get("confidence"), DEFAULT_CONFIDENCE),
        threat_level=coerce_enum(raw.get("threat_level"), THREAT_LEVELS, DEFAULT_THREAT_LEVEL),
        pattern_similarity=pattern_similarity,
        learning_feedback=learning_feedback,
        category=category.strip() if isinstance(category, str) and category.strip() else None,
        categories=string_list(raw.get("categories")),
        risk_factors=string_list(raw.get("risk_factors")),
        recommended_action=(
            recommended_action.strip()
            if isinstance(recommended_action, str) and recommended_action.strip()
            else None
        ),
        analysis=analysis,
        strategy=strategy,
    )
    logger.debug(
        "Validated verdict from '%s': spam=%s confidence=%.2f",
        strategy, verdict.is_spam, verdict.confidence,
    )
    return verdict
