"""
Reference tiers — in-memory, TTL-aware, and slow/unreliable test doubles.

None of these evict by size; they exist to exercise the layered cache
and to show how a tier is written.
"""

from __future__ import annotations

import asyncio
import random
from datetime import timedelta

from layered.cache._item import CachedItem
from layered.cache._types import Tier


class TierUnavailable(Exception):
    """Tier could not answer (simulated outage)."""

    def __init__(self, tier: str, operation: str) -> None:
        super().__init__(f"{tier}: {operation} failed")
        self.tier = tier
        self.operation = operation


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Tier — Plain Map
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryTier[T]:
    """
    In-memory tier.

    Stores items verbatim, expired ones included. Expiry filtering is
    left to the reader.

    Example:
        tier = MemoryTier[User](name="L1")
    """

    def __init__(self, name: str = "memory") -> None:
        self._name = name
        self._items: dict[str, CachedItem[T]] = {}
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    async def get(self, key: str) -> CachedItem[T] | None:
        async with self._lock:
            return self._items.get(key)

    async def add(self, key: str, item: CachedItem[T]) -> None:
        async with self._lock:
            self._items[key] = item

    async def remove(self, key: str) -> None:
        async with self._lock:
            self._items.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._items.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# TTL Tier — Hides Expired Entries
# ═══════════════════════════════════════════════════════════════════════════════


class TtlTier[T](MemoryTier[T]):
    """
    In-memory tier that never returns an expired item.

    Expired entries are purged lazily, on read.
    """

    def __init__(self, name: str = "ttl") -> None:
        super().__init__(name)

    async def get(self, key: str) -> CachedItem[T] | None:
        async with self._lock:
            item = self._items.get(key)
            if item is not None and item.is_expired:
                del self._items[key]
                return None
            return item


# ═══════════════════════════════════════════════════════════════════════════════
# Delayed Tier — Slow / Unreliable Wrapper
# ═══════════════════════════════════════════════════════════════════════════════


class DelayedTier[T]:
    """
    Wraps a tier with random latency and optional failures.

    Simulates a network-backed tier.

    Example:
        remote = DelayedTier(MemoryTier[User](), min_delay=timedelta(milliseconds=10),
                             max_delay=timedelta(milliseconds=50), failure_rate=0.1)
    """

    def __init__(
        self,
        inner: Tier[T],
        min_delay: timedelta = timedelta(milliseconds=10),
        max_delay: timedelta = timedelta(milliseconds=50),
        failure_rate: float = 0.0,
        rng: random.Random | None = None,
        name: str | None = None,
    ) -> None:
        if min_delay > max_delay:
            raise ValueError("min_delay must not exceed max_delay")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be within [0, 1]")
        self._inner = inner
        self._min = min_delay.total_seconds()
        self._max = max_delay.total_seconds()
        self._failure_rate = failure_rate
        self._rng = rng or random.Random()
        self._name = name or f"delayed:{inner.name}"
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    async def _delay(self, operation: str) -> None:
        self.calls += 1
        await asyncio.sleep(self._rng.uniform(self._min, self._max))
        if self._failure_rate and self._rng.random() < self._failure_rate:
            raise TierUnavailable(self._name, operation)

    async def get(self, key: str) -> CachedItem[T] | None:
        await self._delay("get")
        return await self._inner.get(key)

    async def add(self, key: str, item: CachedItem[T]) -> None:
        await self._delay("add")
        await self._inner.add(key, item)

    async def remove(self, key: str) -> None:
        await self._delay("remove")
        await self._inner.remove(key)

    async def clear(self) -> None:
        await self._delay("clear")
        await self._inner.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# Named Tier — Rename Wrapper
# ═══════════════════════════════════════════════════════════════════════════════


class NamedTier[T]:
    """Wrapper to give tier a distinct name."""

    def __init__(self, inner: Tier[T], tier_name: str) -> None:
        self._inner = inner
        self._name = tier_name

    @property
    def name(self) -> str:
        return self._name

    async def get(self, key: str) -> CachedItem[T] | None:
        return await self._inner.get(key)

    async def add(self, key: str, item: CachedItem[T]) -> None:
        await self._inner.add(key, item)

    async def remove(self, key: str) -> None:
        await self._inner.remove(key)

    async def clear(self) -> None:
        await self._inner.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "MemoryTier",
    "TtlTier",
    "DelayedTier",
    "NamedTier",
    "TierUnavailable",
)
