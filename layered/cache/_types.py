"""
Cache types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Protocol

from layered.cache._item import CachedItem

# ═══════════════════════════════════════════════════════════════════════════════
# Tier Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Tier[T](Protocol):
    """
    Cache tier protocol.

    Implement this for custom backends (Redis, Memcached, etc.)
    Every operation may suspend. A tier owns its storage; the layered
    cache never looks inside it.

    Example:
        class RedisTier[T]:
            def __init__(self, client: Redis) -> None:
                self.client = client

            @property
            def name(self) -> str:
                return "redis"

            async def get(self, key: str) -> CachedItem[T] | None:
                data = await self.client.get(key)
                return pickle.loads(data) if data else None

            async def add(self, key: str, item: CachedItem[T]) -> None:
                ttl = max(int(item.expires_in.total_seconds()), 1)
                await self.client.set(key, pickle.dumps(item), ex=ttl)

            async def remove(self, key: str) -> None:
                await self.client.delete(key)

            async def clear(self) -> None:
                await self.client.flushdb()
    """

    @property
    def name(self) -> str:
        """Tier name for events and results."""
        ...

    async def get(self, key: str) -> CachedItem[T] | None:
        """Get item. Returns None on miss; never raises for not-found."""
        ...

    async def add(self, key: str, item: CachedItem[T]) -> None:
        """Store item, overwriting any existing entry."""
        ...

    async def remove(self, key: str) -> None:
        """Remove key. No-op if absent."""
        ...

    async def clear(self) -> None:
        """Remove every entry owned by this tier."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Cache Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CacheResult[T]:
    """Read-through result with metadata."""

    value: T
    hit: bool
    tier: str | None
    backfilled: tuple[str, ...]
    expires_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CacheErrorKind(Enum):
    """Cache error kinds."""

    CONNECTION = auto()
    SERIALIZATION = auto()
    TIMEOUT = auto()


@dataclass(frozen=True, slots=True)
class CacheError:
    """Cache operation error."""

    kind: CacheErrorKind
    message: str


class ConfigurationError(ValueError):
    """Cache topology is invalid (e.g. no tiers)."""


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Tier",
    "CacheResult",
    "CacheError",
    "CacheErrorKind",
    "ConfigurationError",
)
