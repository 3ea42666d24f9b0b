# tests/unit/logging/test_log_context.py — v2
"""Tests for logging/context.py — request-scoped context variables."""

from __future__ import annotations

import asyncio

import pytest

from spamsentinel.logging.context import (
    FINGERPRINT_PREFIX_LEN,
    LogContext,
    clear_context,
    get_context,
    set_request_context,
    set_strategy_context,
)


class TestContext:
    def test_empty_by_default(self):
        clear_context()
        assert get_context().as_dict() == {}

    def test_request_context(self):
        set_request_context("req1", "a" * 64)
        ctx = get_context()
        assert ctx.request_id == "req1"
        assert ctx.fingerprint == "a" * FINGERPRINT_PREFIX_LEN

    def test_strategy_context(self):
        set_strategy_context("memory")
        assert get_context().strategy == "memory"

    def test_clear(self):
        set_request_context("req1", "abc")
        set_strategy_context("basic")
        clear_context()
        assert get_context() == LogContext()

    def test_as_dict_drops_none(self):
        assert LogContext(request_id="r").as_dict() == {"request_id": "r"}


class TestTaskIsolation:
    @pytest.mark.asyncio
    async def test_strategy_does_not_leak_between_tasks(self):
        set_request_context("req1")

        async def _run(name: str) -> tuple[str | None, str | None]:
            set_strategy_context(name)
            await asyncio.sleep(0)
            ctx = get_context()
            return ctx.request_id, ctx.strategy

        results = await asyncio.gather(
            asyncio.create_task(_run("basic")),
            asyncio.create_task(_run("advanced")),
        )
        assert results == [("req1", "basic"), ("req1", "advanced")]
        assert get_context().strategy is None
