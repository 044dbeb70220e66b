"""
LayeredCache — direct use, no Result wrapping.

- Producer may be sync or async
- Expiry may depend on the produced value (HTTP max-age)
- set() pushes a known value into every tier
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta

from layered import cache as C
from examples._infra import banner, run


@dataclass(frozen=True, slots=True)
class Response:
    body: str
    max_age: int


async def fetch_page() -> Response:
    print("  [ORIGIN] GET /page")
    await asyncio.sleep(0.05)
    return Response(body="<html>hello</html>", max_age=30)


memory = C.MemoryTier[Response](name="memory")
shared = C.DelayedTier(C.TtlTier[Response](), name="shared")

pages = C.LayeredCache(
    memory,
    shared,
    config=C.CacheConfig(backfill=C.policy.backfill.parallel()),
)
page_expiry = C.from_value(lambda r: r.max_age)


async def main() -> None:
    banner("LayeredCache: value-derived expiry")

    r1 = await pages.get_result("/page", fetch_page, page_expiry)
    print(f"1. hit={r1.hit} backfilled={r1.backfilled} expires_at={r1.expires_at:%H:%M:%S}")

    r2 = await pages.get_result("/page", fetch_page, page_expiry)
    print(f"2. hit={r2.hit} tier={r2.tier}")

    await pages.set("/page", Response("<html>edited</html>", 30), C.utcnow() + timedelta(seconds=30))
    body = (await pages.get("/page", fetch_page, page_expiry)).body
    print(f"3. after set: {body}")


if __name__ == "__main__":
    run(main)
