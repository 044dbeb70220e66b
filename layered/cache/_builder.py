"""
Cache builder — fluent API.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from kungfu import Error, LazyCoroResult, Ok, Result

from layered.cache._config import CacheConfig
from layered.cache._item import utcnow
from layered.cache._layered import Expiry, ExpiryFn, LayeredCache
from layered.cache._types import CacheResult, ConfigurationError, Tier

# ═══════════════════════════════════════════════════════════════════════════════
# Key Function Type
# ═══════════════════════════════════════════════════════════════════════════════

type KeyFn[K] = Callable[[K], str]


class _FetchFailed(Exception):
    """Carries a fetch Error through the layered cache unchanged."""

    def __init__(self, error: object) -> None:
        super().__init__(error)
        self.error = error


# ═══════════════════════════════════════════════════════════════════════════════
# Expiry Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def ttl[T](
    *,
    seconds: float = 0,
    minutes: float = 0,
    hours: float = 0,
    days: float = 0,
) -> ExpiryFn[T]:
    """
    Relative expiry: now + duration, evaluated when the value is produced.

    Example:
        C.cache(make_key, fetch_user, expires=C.ttl(minutes=5))
    """
    delta = timedelta(seconds=seconds, minutes=minutes, hours=hours, days=days)
    if delta <= timedelta(0):
        raise ValueError("ttl must be positive")

    def rule(_value: T) -> datetime:
        return utcnow() + delta

    return rule


def from_value[T](max_age: Callable[[T], timedelta | float]) -> ExpiryFn[T]:
    """
    Expiry derived from the produced value.

    `max_age` returns a timedelta or a number of seconds.

    Example:
        # cache HTTP responses for as long as Cache-Control allows
        C.from_value(lambda resp: resp.max_age)
    """

    def rule(value: T) -> datetime:
        age = max_age(value)
        if not isinstance(age, timedelta):
            age = timedelta(seconds=age)
        return utcnow() + age

    return rule


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Cache[K, T, E]:
    """
    Fluent cache builder.

    Type parameters:
        K: Key input type
        T: Value type
        E: Error type from fetch

    Example:
        user_cache = (
            C.cache(make_key, fetch_user)
            .tier(local)
            .tier(remote)
            .build()
        )
    """

    _key_fn: KeyFn[K]
    _fetch: Callable[[K], LazyCoroResult[T, E]]
    _expires: Expiry[T] | None
    _tiers: tuple[Tier[T], ...]
    _config: CacheConfig

    def tier(self, t: Tier[T]) -> Cache[K, T, E]:
        """Add cache tier. Tiers are consulted in the order added."""
        return replace(self, _tiers=(*self._tiers, t))

    def config(self, cfg: CacheConfig) -> Cache[K, T, E]:
        """Replace configuration."""
        return replace(self, _config=cfg)

    def build(self) -> CacheExecutor[K, T, E]:
        """
        Build executable cache.

        Raises:
            ConfigurationError: no tier was added
        """
        if not self._tiers:
            raise ConfigurationError("cache needs at least one .tier()")
        return CacheExecutor(
            key_fn=self._key_fn,
            fetch=self._fetch,
            expires=self._expires,
            layers=LayeredCache(*self._tiers, config=self._config),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Executor
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class CacheExecutor[K, T, E]:
    """Compiled cache executor."""

    key_fn: KeyFn[K]
    fetch: Callable[[K], LazyCoroResult[T, E]]
    expires: Expiry[T] | None
    layers: LayeredCache[T]

    def get(self, key: K) -> LazyCoroResult[CacheResult[T], E]:
        """
        Get value from cache.

        Tries tiers in order, then falls back to fetch.
        Missed tiers are back-filled; fetch errors are returned, not cached.
        """
        cache_key = self.key_fn(key)
        fetch_fn = self.fetch
        layers = self.layers

        async def produce() -> T:
            result = await fetch_fn(key)
            match result:
                case Ok(value):
                    return value
                case Error(e):
                    raise _FetchFailed(e)

        async def execute() -> Result[CacheResult[T], E]:
            try:
                return Ok(await layers.get_result(cache_key, produce, self.expires))
            except _FetchFailed as failed:
                return Error(failed.error)

        return LazyCoroResult(execute)

    async def set(self, key: K, value: T, expires_at: datetime | None = None) -> None:
        """Write value to all tiers."""
        await self.layers.set(self.key_fn(key), value, expires_at)

    async def invalidate(self, key: K) -> None:
        """Remove key from all tiers."""
        await self.layers.remove(self.key_fn(key))


# ═══════════════════════════════════════════════════════════════════════════════
# cache() — Entry Point (Type-Safe)
# ═══════════════════════════════════════════════════════════════════════════════


def cache[K, T, E](
    key: KeyFn[K],
    fetch: Callable[[K], LazyCoroResult[T, E]],
    expires: Expiry[T] | None = None,
) -> Cache[K, T, E]:
    """
    Create cache builder with key function and fetch.

    Types are inferred from arguments — no manual annotation needed.

    Example:
        from layered import cache as C

        def make_key(uid: UserId) -> str:
            return f"user:{uid.value}"

        def fetch_user(uid: UserId) -> LazyCoroResult[User, NotFound]:
            return L.catching_async(...)

        user_cache = (
            C.cache(make_key, fetch_user, expires=C.ttl(minutes=5))
            .tier(C.MemoryTier())
            .build()
        )

        result = await user_cache.get(user_id)
    """
    return Cache(
        _key_fn=key,
        _fetch=fetch,
        _expires=expires,
        _tiers=(),
        _config=CacheConfig(),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Cache", "CacheExecutor", "cache", "ttl", "from_value")
