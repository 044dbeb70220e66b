"""
Back-fill policies.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SequentialPolicy:
    """Write missed tiers one at a time, nearest to the hit first."""
    pass

def sequential() -> SequentialPolicy:
    """Back-fill one tier at a time."""
    return SequentialPolicy()


@dataclass(frozen=True, slots=True)
class ParallelPolicy:
    """Write all missed tiers concurrently."""
    pass

def parallel() -> ParallelPolicy:
    """Back-fill all missed tiers at once."""
    return ParallelPolicy()


type BackfillPolicy = SequentialPolicy | ParallelPolicy


__all__ = (
    "SequentialPolicy",
    "sequential",
    "ParallelPolicy",
    "parallel",
    "BackfillPolicy",
)
