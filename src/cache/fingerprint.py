# src/cache/fingerprint.py — v2
"""Input normalization and content fingerprinting.

``normalize`` produces the canonical text handed to strategies: trimmed,
with instruction-override phrases redacted, and bounded in length.
``fingerprint`` hashes a case- and whitespace-insensitive form of it for
use as a cache key.
"""

from __future__ import annotations

import hashlib
import re

REDACTION_MARKER = "[FILTERED CONTENT]"
TRUNCATION_MARKER = "..."
DEFAULT_MAX_CHARS = 3000

# Override verb followed, within the same clause, by a prompt-ish target.
_INJECTION_PATTERN = re.compile(
    r"\b(?:ignore|disregard|forget)\b[^.!?\n]*(?:previous|above|instructions?|prompts?)",
    re.IGNORECASE,
)


def redact(text: str) -> str:
    """Replace instruction-override phrases with the redaction marker."""
    return _INJECTION_PATTERN.sub(REDACTION_MARKER, text)


def truncate(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Cut text to max_chars, appending an ellipsis marker when cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def normalize(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Canonicalize input text for strategies.

    Args:
        text: Raw input text (non-blank).
        max_chars: Length bound applied after redaction.

    Returns:
        Trimmed, redacted, length-bounded text with case preserved.
    """
    return truncate(redact(text.strip()), max_chars)


def fingerprint(canonical_text: str) -> str:
    """SHA-256 hex digest of the case-folded, whitespace-collapsed text."""
    return hashlib.sha256(_digest_form(canonical_text).encode("utf-8")).hexdigest()


def _digest_form(text: str) -> str:
    """Case-fold and collapse whitespace runs."""
    return re.sub(r"\s+", " ", text.casefold()).strip()
