"""
Layered cache — cascading read-through over ordered tiers.

    cache = LayeredCache(memory, redis)
    user = await cache.get(f"user:{uid}", lambda: db.load_user(uid), utcnow() + timedelta(minutes=5))

READ:  tier 1 → miss → tier 2 → miss → ... → produce()
FILL:  every tier that missed gets the value (tiers after the hit are untouched)
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime

from combinators import lift as L, parallel as C_parallel
from kungfu import Error, Ok

from layered.cache._config import CacheConfig
from layered.cache._events import CacheEvent, EventKind, emit
from layered.cache._item import CachedItem, as_utc, utcnow
from layered.cache._types import CacheResult, ConfigurationError, Tier
from layered.cache.policy._backfill import ParallelPolicy

# ═══════════════════════════════════════════════════════════════════════════════
# Type Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Producer[T] = Callable[[], T | Awaitable[T]]
"""Fallback called on full miss. Sync or async."""

type ExpiryFn[T] = Callable[[T], datetime]
"""Expiry computed from the produced value (e.g. HTTP max-age)."""

type Expiry[T] = datetime | ExpiryFn[T]
"""Fixed instant or function of the value."""


# ═══════════════════════════════════════════════════════════════════════════════
# LayeredCache
# ═══════════════════════════════════════════════════════════════════════════════


class LayeredCache[T]:
    """
    Read-through cache over an ordered, non-empty list of tiers.

    Tiers go fastest first. Owns no mutable state besides the tier tuple,
    so one instance can be shared between tasks; tiers do their own locking.

    Tier failures are never surfaced: a failing get() counts as a miss,
    a failing add() leaves that tier stale until the next miss.
    Only the producer's own exception reaches the caller.
    """

    __slots__ = ("_tiers", "_config")

    def __init__(self, *tiers: Tier[T], config: CacheConfig | None = None) -> None:
        if not tiers:
            raise ConfigurationError("LayeredCache needs at least one tier")
        self._tiers: tuple[Tier[T], ...] = tiers
        self._config = config or CacheConfig()

    @property
    def tiers(self) -> tuple[Tier[T], ...]:
        return self._tiers

    @property
    def config(self) -> CacheConfig:
        return self._config

    # ───────────────────────────────────────────────────────────────────────────
    # Read-through
    # ───────────────────────────────────────────────────────────────────────────

    async def get(
        self,
        key: str,
        produce: Producer[T],
        expires: Expiry[T] | None = None,
    ) -> T:
        """
        Get value, falling back to produce() on a full miss.

        Args:
            key: Cache key
            produce: Fallback, invoked at most once
            expires: Absolute instant, function of the produced value,
                     or None for config.default_ttl from now

        Raises:
            Whatever produce() raises. Nothing is cached in that case.
        """
        result = await self.get_result(key, produce, expires)
        return result.value

    async def get_result(
        self,
        key: str,
        produce: Producer[T],
        expires: Expiry[T] | None = None,
    ) -> CacheResult[T]:
        """Same as get(), with hit/tier/back-fill metadata."""
        hook = self._config.on_event
        missed: list[Tier[T]] = []

        for tier in self._tiers:
            item = await self._lookup(tier, key)
            if item is not None:
                emit(hook, CacheEvent(EventKind.HIT, key, tier.name))
                filled = await self._backfill(key, item, missed)
                return CacheResult(
                    value=item.value,
                    hit=True,
                    tier=tier.name,
                    backfilled=filled,
                    expires_at=item.expires_at,
                )
            missed.append(tier)

        emit(hook, CacheEvent(EventKind.FETCH, key))
        value = await _call(produce)
        item = CachedItem(value, self._expiry(expires, value))
        filled = await self._backfill(key, item, missed)
        return CacheResult(
            value=value,
            hit=False,
            tier=None,
            backfilled=filled,
            expires_at=item.expires_at,
        )

    # ───────────────────────────────────────────────────────────────────────────
    # Writes
    # ───────────────────────────────────────────────────────────────────────────

    async def set(self, key: str, value: T, expires_at: datetime | None = None) -> None:
        """Write value to every tier, regardless of what they hold."""
        if expires_at is None:
            expires_at = utcnow() + self._config.default_ttl
        item = CachedItem(value, expires_at)
        await self._fan_out(
            key,
            self._tiers,
            lambda t: t.add(key, item),
            EventKind.SET_ERROR,
        )

    async def remove(self, key: str) -> None:
        """Remove key from every tier."""
        await self._fan_out(key, self._tiers, lambda t: t.remove(key), EventKind.TIER_ERROR)

    async def clear(self) -> None:
        """Clear every tier."""
        await self._fan_out(None, self._tiers, lambda t: t.clear(), EventKind.TIER_ERROR)

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    async def _lookup(self, tier: Tier[T], key: str) -> CachedItem[T] | None:
        """Query one tier. Absent, expired and failing all read as None."""
        hook = self._config.on_event
        try:
            item = await tier.get(key)
        except Exception as e:
            emit(hook, CacheEvent(EventKind.TIER_ERROR, key, tier.name, e))
            return None

        if item is None:
            emit(hook, CacheEvent(EventKind.MISS, key, tier.name))
            return None
        if item.is_expired:
            emit(hook, CacheEvent(EventKind.EXPIRED, key, tier.name))
            return None
        return item

    def _expiry(self, expires: Expiry[T] | None, value: T) -> datetime:
        if expires is None:
            return utcnow() + self._config.default_ttl
        if isinstance(expires, datetime):
            return as_utc(expires)
        return expires(value)

    async def _backfill(
        self,
        key: str,
        item: CachedItem[T],
        missed: list[Tier[T]],
    ) -> tuple[str, ...]:
        """Write item into missed tiers, most recently missed first."""
        if not missed:
            return ()
        return await self._fan_out(
            key,
            list(reversed(missed)),
            lambda t: t.add(key, item),
            EventKind.BACKFILL_ERROR,
            success=EventKind.BACKFILL,
        )

    async def _fan_out(
        self,
        key: str | None,
        tiers: Sequence[Tier[T]],
        op: Callable[[Tier[T]], Awaitable[None]],
        on_failure: EventKind,
        success: EventKind | None = None,
    ) -> tuple[str, ...]:
        """
        Run op on each tier, swallowing tier failures.

        Returns names of tiers where op succeeded.
        """
        hook = self._config.on_event

        async def run_one(t: Tier[T]) -> bool:
            try:
                await op(t)
            except Exception as e:
                emit(hook, CacheEvent(on_failure, key, t.name, e))
                return False
            if success is not None:
                emit(hook, CacheEvent(success, key, t.name))
            return True

        if isinstance(self._config.backfill, ParallelPolicy) and len(tiers) > 1:
            parallel_result = await C_parallel(*[
                L.catching_async(lambda tier=t: run_one(tier), on_error=str)
                for t in tiers
            ])
            match parallel_result:
                case Ok(results):
                    done = list(results)
                case Error(_):
                    # run_one absorbs tier failures; only reachable on combinator failure
                    done = [False] * len(tiers)
        else:
            done = [await run_one(t) for t in tiers]

        return tuple(t.name for t, ok in zip(tiers, done) if ok)


async def _call[T](produce: Producer[T]) -> T:
    """Invoke producer; await if it returned an awaitable."""
    value = produce()
    if inspect.isawaitable(value):
        return await value
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("LayeredCache", "Producer", "Expiry", "ExpiryFn")
