# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for LLM routing, cache bounds, normalizer limits,
strategy selection and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spamsentinel.config.strategies import DEFAULT_STRATEGY, STRATEGY_REGISTRY


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "openai"
    llm_default_model: str = "gpt-4o"
    llm_default_temperature: float = 0.1
    llm_max_tokens: int = 500
    llm_timeout_s: float = 30.0

    # Provider credentials / endpoints
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Per-strategy LLM assignment (provider:model, highest priority)
    llm_basic: str = ""
    llm_advanced: str = ""
    llm_memory: str = ""

    # === Strategies ===
    default_strategy: str = DEFAULT_STRATEGY
    compare_strategies: str = "basic,advanced,memory"
    memory_history_size: int = 20
    batch_concurrency: int = 4

    # === Input limits ===
    max_canonical_chars: int = 3000
    max_input_chars: int = 10_000

    # === Cache ===
    cache_enabled: bool = True
    cache_ttl_seconds: float = 3600.0
    cache_max_entries: int = 100

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "cache_ttl_seconds",
        "cache_max_entries",
        "max_canonical_chars",
        "max_input_chars",
        "batch_concurrency",
        "llm_max_tokens",
        "llm_timeout_s",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:  # noqa: N805
        """Limits and bounds must be strictly positive."""
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("memory_history_size")
    @classmethod
    def validate_history_size(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("memory_history_size must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_strategies(self) -> Settings:
        """Strategy names must all be registered."""
        errors: list[str] = []

        if self.default_strategy not in STRATEGY_REGISTRY:
            errors.append(f"DEFAULT_STRATEGY {self.default_strategy!r} is not a known strategy")

        names = self.compare_strategies_list
        if not names:
            errors.append("COMPARE_STRATEGIES must name at least one strategy")
        unknown = [n for n in names if n not in STRATEGY_REGISTRY]
        if unknown:
            errors.append(f"COMPARE_STRATEGIES has unknown strategies: {', '.join(unknown)}")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def compare_strategies_list(self) -> list[str]:
        """Parse comma-separated strategy names, dropping duplicates."""
        seen: list[str] = []
        for name in self.compare_strategies.split(","):
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or embedding).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
