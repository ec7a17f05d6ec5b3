"""Tests for the dashboard cache helpers."""

import pytest

from src.utils.cache import cache, cached, make_cache_key


class TestMakeCacheKey:
    def test_namespace_and_args(self):
        assert make_cache_key("dashboard:trend", 3, None, period="6m") == (
            "dashboard:trend:3:period=6m"
        )

    def test_kwargs_sorted(self):
        assert make_cache_key("ns", b=2, a=1) == "ns:a=1:b=2"

    def test_long_keys_hashed(self):
        key = make_cache_key("dashboard:summary", "x" * 300)
        assert key.startswith("dashboard:summary:")
        assert len(key) < 40


class TestCachedDecorator:
    @pytest.mark.asyncio
    async def test_passthrough_without_redis(self):
        """Test a disconnected cache always calls through."""
        assert not cache.connected
        calls = []

        @cached("dashboard:test")
        async def compute(db, value):
            calls.append(value)
            return {"value": value}

        assert await compute(object(), 1) == {"value": 1}
        assert await compute(object(), 1) == {"value": 1}
        assert calls == [1, 1]

    @pytest.mark.asyncio
    async def test_operations_are_noops_when_disconnected(self):
        assert await cache.get("anything") is None
        assert await cache.set("anything", 1) is False
        assert await cache.delete_pattern("dashboard:*") == 0
