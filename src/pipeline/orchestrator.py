# src/pipeline/orchestrator.py — v2
"""Classification orchestrator — cache, strategy dispatch, validation, consensus.

Single-strategy path (``classify``):
  blank input -> fixed empty-input verdict, no oracle call
  normalize -> fingerprint -> cache lookup (cacheable strategies only)
    hit  -> cached copy marked from_cache
    miss -> invoke strategy -> validate -> cache write -> verdict
  any oracle/parse failure -> fail-safe verdict (never raised)

Comparison path (``compare``): every configured strategy runs as its own
asyncio task on the same canonical text; the orchestrator waits for all of
them to settle, drops the ones that failed and reduces the rest to a
consensus. When nothing survives, the result carries the fail-safe verdict.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from spamsentinel.cache.fingerprint import DEFAULT_MAX_CHARS, fingerprint, normalize
from spamsentinel.cache.models import CacheStats
from spamsentinel.core.consensus import NO_CONSENSUS, compute_consensus
from spamsentinel.core.errors import UnknownStrategyError
from spamsentinel.core.models import (
    ComparisonResult,
    Verdict,
    empty_input_verdict,
    fail_safe_verdict,
)
from spamsentinel.core.validator import build_verdict
from spamsentinel.logging.context import (
    clear_context,
    set_request_context,
    set_strategy_context,
)
from spamsentinel.tracking.stats_aggregator import VerdictStats

if TYPE_CHECKING:
    from spamsentinel.cache.ttl_cache import BoundedTTLCache
    from spamsentinel.strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)

DEFAULT_BATCH_CONCURRENCY = 4


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class ClassificationOrchestrator:
    """Entry point for classifying text with one or several strategies.

    Args:
        strategies: Strategy instances, addressed by their ``name``.
        cache: Shared verdict cache; None disables caching.
        default_strategy: Strategy used when ``classify`` gets no name.
        compare_strategies: Strategies run by ``compare`` (default: all).
        max_canonical_chars: Length bound of the text sent to strategies.
        batch_concurrency: Parallel ``classify`` calls in ``classify_many``.
    """

    def __init__(
        self,
        strategies: Iterable[BaseStrategy],
        cache: BoundedTTLCache | None = None,
        default_strategy: str | None = None,
        compare_strategies: Sequence[str] | None = None,
        max_canonical_chars: int = DEFAULT_MAX_CHARS,
        batch_concurrency: int = DEFAULT_BATCH_CONCURRENCY,
    ) -> None:
        self._strategies: dict[str, BaseStrategy] = {s.name: s for s in strategies}
        if not self._strategies:
            raise ValueError("ClassificationOrchestrator needs at least one strategy")

        self._cache = cache
        self._max_chars = max_canonical_chars
        self._batch_concurrency = max(1, batch_concurrency)
        self._stats = VerdictStats()

        self._default = default_strategy or next(iter(self._strategies))
        self._resolve(self._default)

        names = list(compare_strategies) if compare_strategies else list(self._strategies)
        for name in names:
            self._resolve(name)
        self._compare_names = names

    @property
    def strategy_names(self) -> list[str]:
        return list(self._strategies)

    @property
    def compare_strategy_names(self) -> list[str]:
        return list(self._compare_names)

    @property
    def default_strategy(self) -> str:
        return self._default

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    async def classify(self, text: str | None, strategy: str | None = None) -> Verdict:
        """Classify text with one strategy.

        Oracle, parse and validation failures never escape: they come back
        as the fail-safe verdict. A strategy name that is not registered is
        a caller bug rather than a runtime failure, so it raises before any
        work starts, like ``create_llm_client`` does for unknown providers.

        Raises:
            UnknownStrategyError: If strategy is not registered.
        """
        strat = self._resolve(strategy or self._default)
        start = time.monotonic()
        request_id = uuid.uuid4().hex[:8]

        try:
            if _is_blank(text):
                set_request_context(request_id)
                logger.info("Blank input, returning empty-input verdict")
                verdict = empty_input_verdict(strat.name)
            else:
                canonical = normalize(text, self._max_chars)
                digest = fingerprint(canonical)
                set_request_context(request_id, digest)

                result = await self._run_strategy(strat, canonical, digest)
                if result is None:
                    logger.warning("Falling back to fail-safe verdict")
                    verdict = fail_safe_verdict(strat.name).model_copy(
                        update={"analysis_time_ms": _elapsed_ms(start)}
                    )
                else:
                    verdict = result
                    self._stats.add(verdict)

            logger.info(
                "Classified with '%s': spam=%s confidence=%.2f cached=%s (%dms)",
                strat.name, verdict.is_spam, verdict.confidence,
                verdict.from_cache, _elapsed_ms(start),
            )
            return verdict
        finally:
            clear_context()

    async def compare(self, text: str | None) -> ComparisonResult:
        """Run every comparison strategy concurrently and reduce to a consensus."""
        start = time.monotonic()
        request_id = uuid.uuid4().hex[:8]

        try:
            if _is_blank(text):
                set_request_context(request_id)
                per_strategy: dict[str, Verdict | None] = {
                    name: empty_input_verdict(name) for name in self._compare_names
                }
                return ComparisonResult(
                    per_strategy=per_strategy,
                    consensus=compute_consensus(list(per_strategy.values())),
                )

            canonical = normalize(text, self._max_chars)
            digest = fingerprint(canonical)
            set_request_context(request_id, digest)

            tasks = {
                name: asyncio.create_task(
                    self._run_strategy(self._strategies[name], canonical, digest)
                )
                for name in self._compare_names
            }
            outcomes = await asyncio.gather(*tasks.values(), return_exceptions=True)

            per_strategy = {}
            for name, outcome in zip(tasks, outcomes):
                if isinstance(outcome, BaseException):
                    logger.warning("Strategy '%s' task ended with %r", name, outcome)
                    per_strategy[name] = None
                else:
                    per_strategy[name] = outcome

            available = [v for v in per_strategy.values() if v is not None]
            if not available:
                logger.error(
                    "All %d strategies failed, returning fail-safe verdict",
                    len(per_strategy),
                )
                return ComparisonResult(
                    per_strategy=per_strategy,
                    consensus=NO_CONSENSUS.model_copy(),
                    fail_safe=fail_safe_verdict().model_copy(
                        update={"analysis_time_ms": _elapsed_ms(start)}
                    ),
                )

            consensus = compute_consensus(available)
            logger.info(
                "Consensus over %d/%d strategies: spam=%s agreement=%.2f (%dms)",
                len(available), len(per_strategy), consensus.is_spam,
                consensus.agreement, _elapsed_ms(start),
            )
            return ComparisonResult(per_strategy=per_strategy, consensus=consensus)
        finally:
            clear_context()

    async def classify_many(
        self, texts: Sequence[str | None], strategy: str | None = None
    ) -> list[Verdict]:
        """Classify several texts concurrently, preserving input order.

        Raises:
            UnknownStrategyError: If strategy is not registered.
        """
        self._resolve(strategy or self._default)
        semaphore = asyncio.Semaphore(self._batch_concurrency)

        async def _one(text: str | None) -> Verdict:
            async with semaphore:
                return await self.classify(text, strategy)

        results = await asyncio.gather(*(_one(t) for t in texts))
        return list(results)

    # ------------------------------------------------------------------
    # Cache / memory management
    # ------------------------------------------------------------------

    def cache_stats(self) -> CacheStats:
        if self._cache is None:
            return CacheStats(capacity=0)
        return self._cache.stats()

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()
            logger.info("Verdict cache cleared")

    async def clear_strategy_memory(self) -> None:
        """Ask every strategy to drop its internal state."""
        await asyncio.gather(*(s.clear_memory() for s in self._strategies.values()))

    async def clear_all(self) -> None:
        self.clear_cache()
        await self.clear_strategy_memory()

    def verdict_stats(self) -> VerdictStats:
        """Running statistics over successful ``classify`` verdicts."""
        return self._stats

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve(self, name: str) -> BaseStrategy:
        strat = self._strategies.get(name)
        if strat is None:
            raise UnknownStrategyError(
                f"Unknown strategy: {name!r}. Available: {', '.join(self._strategies)}"
            )
        return strat

    async def _run_strategy(
        self, strat: BaseStrategy, canonical: str, digest: str
    ) -> Verdict | None:
        """Cache lookup, invocation, validation and cache write for one strategy.

        Returns None when the strategy failed; failures are logged here and
        never raised.
        """
        set_strategy_context(strat.name)
        start = time.monotonic()
        use_cache = self._cache is not None and strat.cacheable

        if use_cache:
            cached = self._cache.get(digest)
            if cached is not None:
                logger.debug("Cache hit for '%s'", strat.name)
                return cached.model_copy(
                    update={"from_cache": True, "analysis_time_ms": _elapsed_ms(start)}
                )

        try:
            raw = await strat.invoke(canonical)
            verdict = build_verdict(raw, strat.name)
        except Exception as exc:
            logger.warning("Strategy '%s' failed: %s", strat.name, exc)
            return None

        verdict = verdict.model_copy(update={"analysis_time_ms": _elapsed_ms(start)})
        if use_cache:
            self._cache.put(digest, verdict)
        return verdict
