# tests/unit/cache/test_ttl_cache.py — v1
"""Tests for cache/ttl_cache.py — TTL expiry, FIFO eviction, hit accounting."""

from __future__ import annotations

import threading

import pytest

from spamsentinel.cache.ttl_cache import BoundedTTLCache
from spamsentinel.core.models import Verdict


def _verdict(reason: str = "r", is_spam: bool = True) -> Verdict:
    return Verdict(is_spam=is_spam, reason=reason, confidence=0.8, strategy="memory")


class TestConstruction:
    def test_defaults(self):
        cache = BoundedTTLCache()
        assert cache.capacity == 100
        assert cache.ttl_seconds == 3600.0
        assert len(cache) == 0

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_invalid_ttl(self, ttl):
        with pytest.raises(ValueError, match="ttl_seconds"):
            BoundedTTLCache(ttl_seconds=ttl)

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="max_entries"):
            BoundedTTLCache(max_entries=0)


class TestGetPut:
    def test_miss_on_unknown(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        assert cache.get("nope") is None

    def test_put_then_get(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("fp1", _verdict("cached"))
        got = cache.get("fp1")
        assert got is not None
        assert got.reason == "cached"

    def test_get_returns_copy(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("fp1", _verdict("original"))
        got = cache.get("fp1")
        got.reason = "mutated"
        assert cache.get("fp1").reason == "original"

    def test_put_stores_copy(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        verdict = _verdict("original")
        cache.put("fp1", verdict)
        verdict.reason = "mutated"
        assert cache.get("fp1").reason == "original"

    def test_contains_does_not_count_hit(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("fp1", _verdict())
        assert "fp1" in cache
        assert "fp2" not in cache
        assert cache.stats().total_hits == 1


class TestExpiry:
    def test_hit_just_before_ttl(self, manual_clock):
        cache = BoundedTTLCache(ttl_seconds=10, clock=manual_clock)
        cache.put("fp1", _verdict())
        manual_clock.advance(9.999)
        assert cache.get("fp1") is not None

    def test_miss_at_exact_ttl(self, manual_clock):
        cache = BoundedTTLCache(ttl_seconds=10, clock=manual_clock)
        cache.put("fp1", _verdict())
        manual_clock.advance(10)
        assert cache.get("fp1") is None

    def test_expired_entry_is_purged(self, manual_clock):
        cache = BoundedTTLCache(ttl_seconds=10, clock=manual_clock)
        cache.put("fp1", _verdict())
        manual_clock.advance(11)
        cache.get("fp1")
        assert "fp1" not in cache
        assert len(cache) == 0

    def test_reput_refreshes_age(self, manual_clock):
        cache = BoundedTTLCache(ttl_seconds=10, clock=manual_clock)
        cache.put("fp1", _verdict("old"))
        manual_clock.advance(8)
        cache.put("fp1", _verdict("new"))
        manual_clock.advance(8)
        got = cache.get("fp1")
        assert got is not None
        assert got.reason == "new"


class TestEviction:
    def test_evicts_oldest_when_full(self, manual_clock):
        cache = BoundedTTLCache(max_entries=2, clock=manual_clock)
        cache.put("a", _verdict("a"))
        cache.put("b", _verdict("b"))
        cache.put("c", _verdict("c"))
        assert len(cache) == 2
        assert "a" not in cache
        assert "b" in cache and "c" in cache

    def test_hits_do_not_protect_from_eviction(self, manual_clock):
        cache = BoundedTTLCache(max_entries=2, clock=manual_clock)
        cache.put("a", _verdict())
        cache.put("b", _verdict())
        cache.get("a")
        cache.get("a")
        cache.put("c", _verdict())
        assert "a" not in cache

    def test_reput_existing_key_does_not_evict(self, manual_clock):
        cache = BoundedTTLCache(max_entries=2, clock=manual_clock)
        cache.put("a", _verdict())
        cache.put("b", _verdict())
        cache.put("a", _verdict("again"))
        assert len(cache) == 2
        assert "b" in cache
        # "a" is now newest, so "b" goes first
        cache.put("c", _verdict())
        assert "b" not in cache
        assert "a" in cache

    def test_never_exceeds_capacity(self, manual_clock):
        cache = BoundedTTLCache(max_entries=5, clock=manual_clock)
        for i in range(50):
            cache.put(f"fp{i}", _verdict())
            assert len(cache) <= 5


class TestStats:
    def test_empty(self):
        stats = BoundedTTLCache(max_entries=7).stats()
        assert stats.count == 0
        assert stats.total_hits == 0
        assert stats.hit_rate == 0.0
        assert stats.oldest is None
        assert stats.newest is None
        assert stats.capacity == 7

    def test_hit_counts_start_at_one(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("a", _verdict())
        cache.put("b", _verdict())
        stats = cache.stats()
        assert stats.count == 2
        assert stats.total_hits == 2
        assert stats.hit_rate == 1.0

    def test_hits_accumulate(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("a", _verdict())
        cache.put("b", _verdict())
        cache.get("a")
        cache.get("a")
        stats = cache.stats()
        assert stats.total_hits == 4
        assert stats.hit_rate == 2.0

    def test_oldest_newest(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("a", _verdict())
        manual_clock.advance(5)
        cache.put("b", _verdict())
        stats = cache.stats()
        assert stats.oldest == 1_000.0
        assert stats.newest == 1_005.0

    def test_clear(self, manual_clock):
        cache = BoundedTTLCache(clock=manual_clock)
        cache.put("a", _verdict())
        cache.clear()
        assert len(cache) == 0
        assert cache.stats().count == 0
        assert cache.get("a") is None


class TestConcurrency:
    def test_threads_share_bounded_cache(self):
        cache = BoundedTTLCache(max_entries=10)
        errors: list[BaseException] = []

        def worker(worker_id: int) -> None:
            try:
                for n in range(500):
                    key = f"w{worker_id}-{n}"
                    cache.put(key, _verdict(key))
                    got = cache.get(key)
                    assert got is None or got.reason == key
                    assert cache.stats().count <= 10
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) == 10
        stats = cache.stats()
        assert stats.count == 10
        assert stats.capacity == 10
