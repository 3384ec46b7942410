# Tests for the in-memory cache expiration rules.

from __future__ import annotations

from cache import MemoryCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += minutes * 60


def test_get_returns_stored_value_until_absolute_deadline() -> None:
    clock = FakeClock()
    cache = MemoryCache(clock=clock)
    cache.set("hotels-list", ["a"], absolute_minutes=40, sliding_minutes=60)

    clock.advance(39)
    assert cache.get("hotels-list") == ["a"]

    clock.advance(2)
    assert cache.get("hotels-list") is None


def test_sliding_window_is_renewed_by_reads() -> None:
    clock = FakeClock()
    cache = MemoryCache(clock=clock)
    cache.set("city_1", "Nablus", absolute_minutes=60, sliding_minutes=10)

    for _ in range(4):
        clock.advance(9)
        assert cache.get("city_1") == "Nablus"

    clock.advance(11)
    assert cache.get("city_1") is None


def test_remove_and_remove_prefix() -> None:
    cache = MemoryCache()
    for key in ("room_1", "room_2", "rooms-list", "review_1"):
        cache.set(key, key, absolute_minutes=5, sliding_minutes=5)

    cache.remove("rooms-list", "missing-key")
    assert "rooms-list" not in cache

    cache.remove_prefix("room_")
    assert cache.get("room_1") is None
    assert cache.get("room_2") is None
    assert cache.get("review_1") == "review_1"

    cache.clear()
    assert "review_1" not in cache
