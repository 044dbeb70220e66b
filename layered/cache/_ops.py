"""
Tier operations — standalone utilities.

For direct administration of a single tier, outside the read-through path.
Tier failures come back as CacheError instead of exceptions.
"""

from __future__ import annotations

import pickle
from collections.abc import Callable

from combinators import lift as L
from kungfu import LazyCoroResult

from layered.cache._item import CachedItem
from layered.cache._types import CacheError, CacheErrorKind, Tier


def _on_error(tier_name: str) -> Callable[[Exception], CacheError]:
    def convert(e: Exception) -> CacheError:
        if isinstance(e, TimeoutError):
            return CacheError(CacheErrorKind.TIMEOUT, f"{tier_name}: {e}")
        if isinstance(e, (pickle.PickleError, ValueError)):
            return CacheError(CacheErrorKind.SERIALIZATION, f"{tier_name}: {e}")
        return CacheError(CacheErrorKind.CONNECTION, f"{tier_name}: {e}")
    return convert


# ═══════════════════════════════════════════════════════════════════════════════
# invalidate() — Single Key in Tier
# ═══════════════════════════════════════════════════════════════════════════════


def invalidate[T](t: Tier[T], key: str) -> LazyCoroResult[None, CacheError]:
    """
    Remove single key from tier.

    Example:
        result = await C.invalidate(local_tier, f"user:{uid}")
    """

    async def do_invalidate() -> None:
        await t.remove(key)

    return L.catching_async(do_invalidate, on_error=_on_error(t.name))


# ═══════════════════════════════════════════════════════════════════════════════
# clear() — Whole Tier
# ═══════════════════════════════════════════════════════════════════════════════


def clear[T](t: Tier[T]) -> LazyCoroResult[None, CacheError]:
    """
    Remove every entry from tier.

    Example:
        await C.clear(local_tier)
    """

    async def do_clear() -> None:
        await t.clear()

    return L.catching_async(do_clear, on_error=_on_error(t.name))


# ═══════════════════════════════════════════════════════════════════════════════
# peek() — Raw Read
# ═══════════════════════════════════════════════════════════════════════════════


def peek[T](t: Tier[T], key: str) -> LazyCoroResult[CachedItem[T] | None, CacheError]:
    """
    Read raw item from tier. Expired items are returned as-is.

    Example:
        match await C.peek(remote_tier, "user:1"):
            case Ok(item) if item is not None:
                print(item.expires_at)
    """

    async def do_peek() -> CachedItem[T] | None:
        return await t.get(key)

    return L.catching_async(do_peek, on_error=_on_error(t.name))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("invalidate", "clear", "peek")
