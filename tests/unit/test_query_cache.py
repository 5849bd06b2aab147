"""Unit tests for QueryCache and tag matching.

Test categories:
- Tag matching: general vs specific tags
- Storage: keep_for, expiry through the injected clock
- Invalidation counts
- In-flight deduplication
"""

import asyncio

import pytest

from hotel_shared.services.query_cache import (
    LIST,
    RESERVATION,
    ROOM,
    USER,
    QueryCache,
    Tag,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> QueryCache:
    return QueryCache(clock=clock)


class TestTagMatching:
    """Which provided tags an invalidation tag reaches."""

    def test_general_tag_matches_every_id_of_its_type(self):
        assert Tag(ROOM).matches(Tag(ROOM, "r1"))
        assert Tag(ROOM).matches(Tag(ROOM, LIST))
        assert Tag(ROOM).matches(Tag(ROOM))

    def test_specific_tag_matches_only_same_id(self):
        assert Tag(ROOM, "r1").matches(Tag(ROOM, "r1"))
        assert not Tag(ROOM, "r1").matches(Tag(ROOM, "r2"))
        assert not Tag(ROOM, "r1").matches(Tag(ROOM))

    def test_other_type_never_matches(self):
        assert not Tag(USER).matches(Tag(ROOM, "r1"))


class TestStorage:
    """put/get behaviour and lifetimes."""

    def test_put_then_get_returns_value(self, cache):
        cache.put("getRooms(null)", ["room"], [Tag(ROOM)], keep_for=60)

        entry = cache.get("getRooms(null)")

        assert entry is not None
        assert entry.value == ["room"]
        assert "getRooms(null)" in cache

    def test_keep_for_zero_stores_nothing(self, cache):
        cache.put("getUserReservations(null)", [], [Tag(RESERVATION, LIST)], keep_for=0)

        assert cache.get("getUserReservations(null)") is None
        assert len(cache) == 0

    def test_keep_for_zero_drops_previous_value(self, cache):
        cache.put("k", 1, [], keep_for=60)
        cache.put("k", 2, [], keep_for=0)

        assert cache.get("k") is None

    def test_entry_expires_after_keep_for(self, cache, clock):
        cache.put("k", "v", [], keep_for=60)

        clock.advance(59)
        assert cache.get("k") is not None

        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_clear_drops_everything(self, cache):
        cache.put("a", 1, [Tag(ROOM)], keep_for=60)
        cache.put("b", 2, [Tag(USER)], keep_for=60)

        cache.clear()

        assert len(cache) == 0


class TestInvalidation:
    """invalidate() drops matching entries and reports how many."""

    def test_general_tag_drops_all_entries_of_type(self, cache):
        cache.put("rooms", [], [Tag(ROOM)], keep_for=60)
        cache.put("room-1", {}, [Tag(ROOM, "r1")], keep_for=60)
        cache.put("me", {}, [Tag(USER)], keep_for=60)

        dropped = cache.invalidate([Tag(ROOM)])

        assert dropped == 2
        assert "me" in cache
        assert "rooms" not in cache

    def test_specific_tag_leaves_general_entries(self, cache):
        cache.put("rooms", [], [Tag(ROOM)], keep_for=60)
        cache.put("room-1", {}, [Tag(ROOM, "r1")], keep_for=60)
        cache.put("room-2", {}, [Tag(ROOM, "r2")], keep_for=60)

        dropped = cache.invalidate([Tag(ROOM, "r1")])

        assert dropped == 1
        assert "rooms" in cache
        assert "room-2" in cache

    def test_list_tag_targets_list_queries(self, cache):
        cache.put(
            "mine",
            [],
            [Tag(RESERVATION, "a"), Tag(RESERVATION, LIST)],
            keep_for=60,
        )
        cache.put("detail-b", {}, [Tag(RESERVATION, "b")], keep_for=60)

        dropped = cache.invalidate([Tag(RESERVATION, LIST)])

        assert dropped == 1
        assert "detail-b" in cache

    def test_no_tags_drops_nothing(self, cache):
        cache.put("rooms", [], [Tag(ROOM)], keep_for=60)

        assert cache.invalidate([]) == 0
        assert "rooms" in cache


class TestInFlightDeduplication:
    """Concurrent identical fetches share one call."""

    @pytest.mark.asyncio
    async def test_concurrent_runs_share_one_fetch(self, cache):
        calls = 0
        release = asyncio.Event()

        async def fetch():
            nonlocal calls
            calls += 1
            await release.wait()
            return "rooms"

        first = asyncio.create_task(cache.run("getRooms(null)", fetch))
        second = asyncio.create_task(cache.run("getRooms(null)", fetch))
        await asyncio.sleep(0)
        release.set()

        assert await first == "rooms"
        assert await second == "rooms"
        assert calls == 1

    @pytest.mark.asyncio
    async def test_sequential_runs_fetch_again(self, cache):
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            return calls

        assert await cache.run("k", fetch) == 1
        assert await cache.run("k", fetch) == 2

    @pytest.mark.asyncio
    async def test_failure_propagates_to_every_waiter(self, cache):
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            raise RuntimeError("boom")

        first = asyncio.create_task(cache.run("k", fetch))
        second = asyncio.create_task(cache.run("k", fetch))
        await asyncio.sleep(0)
        release.set()

        with pytest.raises(RuntimeError):
            await first
        with pytest.raises(RuntimeError):
            await second
