"""Tests for the reference tiers."""

import asyncio
import random
from datetime import datetime, timedelta

import pytest

from layered.cache import (
    CachedItem,
    DelayedTier,
    LayeredCache,
    MemoryTier,
    NamedTier,
    TierUnavailable,
    TtlTier,
)

FAST = timedelta(0)


class TestMemoryTier:
    """Tests for MemoryTier."""

    def test_get_miss(self) -> None:
        assert asyncio.run(MemoryTier().get("nope")) is None

    def test_add_and_get(self, later: datetime) -> None:
        tier = MemoryTier()
        item = CachedItem("v", later)
        asyncio.run(tier.add("k", item))
        assert asyncio.run(tier.get("k")) is item

    def test_returns_expired_items(self, earlier: datetime) -> None:
        tier = MemoryTier()
        asyncio.run(tier.add("k", CachedItem("old", earlier)))
        assert asyncio.run(tier.get("k")).is_expired

    def test_remove_and_clear(self, later: datetime) -> None:
        tier = MemoryTier()

        async def scenario() -> None:
            await tier.add("a", CachedItem(1, later))
            await tier.add("b", CachedItem(2, later))
            await tier.remove("a")
            await tier.remove("missing")
            assert len(tier) == 1
            await tier.clear()

        asyncio.run(scenario())
        assert len(tier) == 0


class TestTtlTier:
    """Tests for TtlTier."""

    def test_hides_and_purges_expired(self, earlier: datetime) -> None:
        tier = TtlTier()
        asyncio.run(tier.add("k", CachedItem("old", earlier)))

        assert asyncio.run(tier.get("k")) is None
        assert "k" not in tier

    def test_keeps_live(self, later: datetime) -> None:
        tier = TtlTier()
        asyncio.run(tier.add("k", CachedItem("v", later)))
        assert asyncio.run(tier.get("k")).value == "v"


class TestDelayedTier:
    """Tests for DelayedTier."""

    def test_passes_through(self, later: datetime) -> None:
        inner = MemoryTier(name="inner")
        tier = DelayedTier(inner, min_delay=FAST, max_delay=FAST)

        asyncio.run(tier.add("k", CachedItem("v", later)))

        assert "k" in inner
        assert asyncio.run(tier.get("k")).value == "v"
        assert tier.calls == 2
        assert tier.name == "delayed:inner"

    def test_always_failing(self) -> None:
        tier = DelayedTier(MemoryTier(), min_delay=FAST, max_delay=FAST, failure_rate=1.0)
        with pytest.raises(TierUnavailable) as exc:
            asyncio.run(tier.get("k"))
        assert exc.value.operation == "get"

    def test_seeded_failures_are_reproducible(self) -> None:
        def outcomes(seed: int) -> list[bool]:
            tier = DelayedTier(
                MemoryTier(), min_delay=FAST, max_delay=FAST,
                failure_rate=0.5, rng=random.Random(seed),
            )
            results = []
            for _ in range(10):
                try:
                    asyncio.run(tier.get("k"))
                    results.append(True)
                except TierUnavailable:
                    results.append(False)
            return results

        assert outcomes(7) == outcomes(7)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_delay": timedelta(seconds=2), "max_delay": timedelta(seconds=1)},
            {"failure_rate": 1.5},
            {"failure_rate": -0.1},
        ],
    )
    def test_invalid_settings(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            DelayedTier(MemoryTier(), **kwargs)

    def test_unavailable_tier_is_skipped(self, later: datetime) -> None:
        down = DelayedTier(MemoryTier(), min_delay=FAST, max_delay=FAST, failure_rate=1.0)
        cache = LayeredCache(down, MemoryTier())

        assert asyncio.run(cache.get("k", lambda: "origin", later)) == "origin"

    def test_slow_second_tier_repopulates_first(self, later: datetime) -> None:
        fast = MemoryTier(name="fast")
        slow = DelayedTier(
            MemoryTier(),
            min_delay=timedelta(milliseconds=1),
            max_delay=timedelta(milliseconds=5),
        )
        cache = LayeredCache(fast, slow)
        calls: list[int] = []

        def produce() -> str:
            calls.append(1)
            return "person"

        asyncio.run(cache.get("GetPerson", produce, later))
        asyncio.run(fast.remove("GetPerson"))
        asyncio.run(cache.get("GetPerson", produce, later))
        slow_calls = slow.calls
        asyncio.run(cache.get("GetPerson", produce, later))

        assert len(calls) == 1
        assert slow.calls == slow_calls


def test_named_tier(later: datetime) -> None:
    inner = MemoryTier()
    tier = NamedTier(inner, "L1")

    asyncio.run(tier.add("k", CachedItem(1, later)))

    assert tier.name == "L1"
    assert "k" in inner
    asyncio.run(tier.clear())
    assert len(inner) == 0
