"""
Cache — multi-tier read-through caching.

    from layered import cache as C

    cache = C.LayeredCache(C.MemoryTier(), remote_tier)
    user = await cache.get(f"user:{uid}", lambda: db.load_user(uid), C.utcnow() + timedelta(minutes=5))

    user_cache = C.cache(key_fn, fetch_fn).tier(C.MemoryTier()).build()
    result = await user_cache.get(user_id)
"""

from __future__ import annotations

from layered.cache import policy
from layered.cache._item import CachedItem, utcnow
from layered.cache._types import (
    Tier,
    CacheResult,
    CacheError,
    CacheErrorKind,
    ConfigurationError,
)
from layered.cache._tiers import (
    MemoryTier,
    TtlTier,
    DelayedTier,
    NamedTier,
    TierUnavailable,
)
from layered.cache._events import CacheEvent, EventKind, EventHook, log_events
from layered.cache._config import CacheConfig
from layered.cache._layered import LayeredCache, Producer, Expiry, ExpiryFn
from layered.cache._builder import cache, Cache, CacheExecutor, ttl, from_value
from layered.cache._ops import invalidate, clear, peek

__all__ = (
    "policy",
    "CachedItem",
    "utcnow",
    "Tier",
    "CacheResult",
    "CacheError",
    "CacheErrorKind",
    "ConfigurationError",
    "MemoryTier",
    "TtlTier",
    "DelayedTier",
    "NamedTier",
    "TierUnavailable",
    "CacheEvent",
    "EventKind",
    "EventHook",
    "log_events",
    "CacheConfig",
    "LayeredCache",
    "Producer",
    "Expiry",
    "ExpiryFn",
    "cache",
    "Cache",
    "CacheExecutor",
    "ttl",
    "from_value",
    "invalidate",
    "clear",
    "peek",
)
