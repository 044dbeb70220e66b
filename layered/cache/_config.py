"""
Cache configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from layered.cache._events import EventHook
from layered.cache.policy._backfill import BackfillPolicy, sequential


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """
    Layered cache settings.

    default_ttl: expiry used when get()/set() receive no expiry rule
    backfill:    how missed tiers are repopulated
    on_event:    observability hook (see log_events)
    """

    default_ttl: timedelta = timedelta(minutes=5)
    backfill: BackfillPolicy = field(default_factory=sequential)
    on_event: EventHook | None = None

    def __post_init__(self) -> None:
        if self.default_ttl <= timedelta(0):
            raise ValueError("default_ttl must be positive")


__all__ = ("CacheConfig",)
