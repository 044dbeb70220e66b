"""
Cache — read-through over stacked tiers.

Key concepts:
- Tier = storage backend (global, inject via DI)
- LayeredCache = ordered tiers, fastest first
- Misses repair themselves: a hit in L2 back-fills L1
"""

from datetime import timedelta

from kungfu import Ok, Error, LazyCoroResult
from combinators import lift as L
from layered import cache as C
from layered.cache import Tier
from examples._infra import banner, run, UserId, User, NotFound, FakeDb


db = FakeDb()


# ═══════════════════════════════════════════════════════════════════════════════
# 1. TIERS ARE GLOBAL — create once, inject everywhere
# ═══════════════════════════════════════════════════════════════════════════════

# L1: In-memory, per-instance (fast, no network)
l1_tier: Tier[User] = C.TtlTier(name="L1-memory")

# L2: Simulated "remote" tier (in real app: Redis, Memcached)
l2_tier: Tier[User] = C.DelayedTier(
    C.MemoryTier(),
    min_delay=timedelta(milliseconds=10),
    max_delay=timedelta(milliseconds=50),
    name="L2-redis",
)

config = C.CacheConfig(default_ttl=timedelta(minutes=1), on_event=C.log_events())


# ═══════════════════════════════════════════════════════════════════════════════
# 2. FETCH FUNCTION — returns LazyCoroResult
# ═══════════════════════════════════════════════════════════════════════════════


def fetch_user(uid: UserId) -> LazyCoroResult[User, NotFound]:
    async def _fetch() -> User:
        print(f"  [ORIGIN] Fetching user {uid.value} from DB...")
        result = await db.get_user(uid)
        match result:
            case Ok(user):
                return user
            case Error(e):
                raise e

    return L.catching_async(
        _fetch,
        on_error=lambda e: e
        if isinstance(e, NotFound)
        else NotFound("User", uid.value),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# 3. CACHE = BUILDER — stacks tiers, type-safe
# ═══════════════════════════════════════════════════════════════════════════════

user_cache = (
    C.cache(lambda uid: f"user:{uid.value}", fetch_user, expires=C.ttl(minutes=1))
    .tier(l1_tier)  # L1: check first
    .tier(l2_tier)  # L2: check second
    .config(config)
    .build()
)

# How it works:
# READ:       L1 → miss → L2 → miss → fetch()
# FILL:       fetch() → store in L2 AND L1; L2 hit → store in L1
# INVALIDATE: remove from L1 AND L2


async def show(label: str, uid: UserId) -> None:
    print(f"\n{label}")
    match await user_cache.get(uid):
        case Ok(r):
            print(f"   tier={r.tier} hit={r.hit} backfilled={r.backfilled} → {r.value.name}")
        case Error(e):
            print(f"   error: {e}")


async def main() -> None:
    banner("Cache: Tier Stacking (L1/L2 Pattern)")

    uid = UserId(1)

    await show("1. First request (miss L1 → miss L2 → fetch from origin):", uid)
    await show("2. Second request (hit L1):", uid)

    await C.invalidate(l1_tier, f"user:{uid.value}")  # simulate L1 eviction
    await show("3. Cleared L1 only (miss L1 → hit L2 → back-fill L1):", uid)

    await user_cache.invalidate(uid)
    await show("4. Invalidated ALL tiers, refetch:", uid)

    await show("5. Unknown user (fetch error is returned, nothing cached):", UserId(42))

    print(f"\nDB queries: {db.queries}")


if __name__ == "__main__":
    run(main)
