"""
layered — read-through caching over ordered tiers.

    from layered import cache as C   # Tiers, LayeredCache, builder
"""

from kungfu import Result, Ok, Error, LazyCoroResult

from layered import cache

__version__ = "0.1.0"

__all__ = (
    "cache",
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
)
