"""
Cache events — optional observability hook.

The layered cache never logs by itself. Pass a hook to see what it does:

    config = CacheConfig(on_event=log_events())
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger("layered.cache")


class EventKind(Enum):
    """What happened."""

    HIT = auto()
    MISS = auto()
    EXPIRED = auto()
    TIER_ERROR = auto()
    FETCH = auto()
    BACKFILL = auto()
    BACKFILL_ERROR = auto()
    SET_ERROR = auto()


@dataclass(frozen=True, slots=True)
class CacheEvent:
    """Single cache event."""

    kind: EventKind
    key: str | None
    tier: str | None = None
    error: BaseException | None = None


type EventHook = Callable[[CacheEvent], None]

_ERRORS = frozenset({EventKind.TIER_ERROR, EventKind.BACKFILL_ERROR, EventKind.SET_ERROR})


def emit(hook: EventHook | None, event: CacheEvent) -> None:
    """Deliver event. A failing hook never breaks a read."""
    if hook is None:
        return
    try:
        hook(event)
    except Exception:
        logger.exception("event hook failed for %s", event.kind.name)


def log_events(
    log: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> EventHook:
    """
    Hook that writes events to logging.

    Errors are logged at WARNING, everything else at `level`.

    Example:
        C.cache(key_fn, fetch).config(CacheConfig(on_event=C.log_events()))
    """
    target = log or logger

    def hook(event: CacheEvent) -> None:
        if event.kind in _ERRORS:
            target.warning(
                "%s key=%s tier=%s error=%r",
                event.kind.name, event.key, event.tier, event.error,
            )
        else:
            target.log(level, "%s key=%s tier=%s", event.kind.name, event.key, event.tier)

    return hook


__all__ = ("EventKind", "CacheEvent", "EventHook", "emit", "log_events")
