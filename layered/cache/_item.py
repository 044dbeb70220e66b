"""
Cached item — value + absolute expiry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


# ═══════════════════════════════════════════════════════════════════════════════
# CachedItem
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CachedItem[T]:
    """
    Immutable cache entry.

    Expiry is evaluated on every read, never stored.

    Example:
        item = CachedItem(user, utcnow() + timedelta(minutes=5))
        if not item.is_expired:
            return item.value
    """

    value: T
    expires_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "expires_at", as_utc(self.expires_at))

    @property
    def is_expired(self) -> bool:
        return self.expires_at < utcnow()

    @property
    def expires_in(self) -> timedelta:
        """Remaining lifetime (negative once expired)."""
        return self.expires_at - utcnow()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("CachedItem", "utcnow", "as_utc")
