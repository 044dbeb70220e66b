"""Shared fixtures: recording tiers and clock helpers."""

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from layered.cache import CachedItem, MemoryTier, utcnow


class SpyTier(MemoryTier):
    """Memory tier that records calls and can be told to fail."""

    def __init__(
        self,
        name: str,
        fail_get: bool = False,
        fail_add: bool = False,
        fail_clear: bool = False,
    ) -> None:
        super().__init__(name)
        self.fail_get = fail_get
        self.fail_add = fail_add
        self.fail_clear = fail_clear
        self.gets: list[str] = []
        self.adds: list[tuple[str, CachedItem]] = []

    async def get(self, key: str) -> CachedItem | None:
        self.gets.append(key)
        if self.fail_get:
            raise ConnectionError(f"{self.name} down")
        return await super().get(key)

    async def add(self, key: str, item: CachedItem) -> None:
        self.adds.append((key, item))
        if self.fail_add:
            raise ConnectionError(f"{self.name} down")
        await super().add(key, item)

    async def clear(self) -> None:
        if self.fail_clear:
            raise ConnectionError(f"{self.name} down")
        await super().clear()

    def seed(self, key: str, value: object, expires_at: datetime) -> None:
        self._items[key] = CachedItem(value, expires_at)

    def peek(self, key: str) -> CachedItem | None:
        return self._items.get(key)


@pytest.fixture
def make_tier() -> Callable[..., SpyTier]:
    def factory(name: str = "tier", **kwargs: bool) -> SpyTier:
        return SpyTier(name, **kwargs)
    return factory


@pytest.fixture
def later() -> datetime:
    return utcnow() + timedelta(seconds=60)


@pytest.fixture
def earlier() -> datetime:
    return utcnow() - timedelta(seconds=1)


class Counter:
    """Producer that counts its calls."""

    def __init__(self, value: object) -> None:
        self.value = value
        self.calls = 0

    def __call__(self) -> object:
        self.calls += 1
        return self.value


@pytest.fixture
def counter() -> Callable[[object], Counter]:
    return Counter
