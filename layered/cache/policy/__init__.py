"""
Cache policies.

Namespace: C.policy.*

Examples:
    CacheConfig(backfill=C.policy.backfill.parallel())
"""

from __future__ import annotations

from layered.cache.policy._backfill import (
    BackfillPolicy,
    ParallelPolicy,
    SequentialPolicy,
    parallel,
    sequential,
)


# Namespace objects
class backfill:
    """Back-fill policies."""

    sequential = staticmethod(sequential)
    parallel = staticmethod(parallel)


__all__ = (
    "backfill",
    "BackfillPolicy",
    "SequentialPolicy",
    "ParallelPolicy",
)
