"""
Tests for approximate hit tracking and the popularity registry.
"""
import asyncio

from shortener_app.cache.keys import CacheKeySchema
from shortener_app.cache.strategies import InMemoryCache
from shortener_app.container import ServiceContainer
from shortener_app.services.hit_tracker import HitTracker


def record_hits(tracker: HitTracker, short_id: str, times: int) -> int:
    async def run():
        count = 0
        for _ in range(times):
            count = await tracker.record_hit(short_id)
        return count

    return asyncio.run(run())


class TestHitTracker:

    def test_counts_hits(self, memory_cache):
        tracker = HitTracker(memory_cache)
        assert record_hits(tracker, "abc1234", 3) == 3

    def test_counter_expires(self, fake_clock):
        tracker = HitTracker(InMemoryCache(clock=fake_clock), counter_ttl=60)
        record_hits(tracker, "abc1234", 2)

        fake_clock.advance(60)

        assert record_hits(tracker, "abc1234", 1) == 1

    def test_not_popular_at_threshold(self, memory_cache, keys):
        tracker = HitTracker(memory_cache, keys=keys, popular_threshold=10)
        record_hits(tracker, "abc1234", 10)

        assert asyncio.run(memory_cache.exists(keys.popular_key("abc1234"))) is False
        assert asyncio.run(tracker.popular()) == []

    def test_popular_above_threshold(self, memory_cache):
        tracker = HitTracker(memory_cache, popular_threshold=10)
        record_hits(tracker, "abc1234", 11)

        popular = asyncio.run(tracker.popular())

        assert [(link.short_id, link.hits) for link in popular] == [("abc1234", 11)]

    def test_popular_sorted_and_limited(self, memory_cache):
        tracker = HitTracker(memory_cache, popular_threshold=1)
        record_hits(tracker, "a", 3)
        record_hits(tracker, "b", 7)
        record_hits(tracker, "c", 5)

        popular = asyncio.run(tracker.popular(limit=2))

        assert [link.short_id for link in popular] == ["b", "c"]

    def test_popular_marker_expires(self, fake_clock):
        tracker = HitTracker(InMemoryCache(clock=fake_clock), popular_threshold=1, popular_ttl=100)
        record_hits(tracker, "abc1234", 2)

        fake_clock.advance(100)

        assert asyncio.run(tracker.popular()) == []

    def test_rebuild_popular_from_counters(self, memory_cache):
        keys = CacheKeySchema("shortener:test")
        asyncio.run(memory_cache.set(keys.hits_key("hot"), "25", ttl=600))
        asyncio.run(memory_cache.set(keys.hits_key("cold"), "2", ttl=600))
        tracker = HitTracker(memory_cache, keys=keys, popular_threshold=10)

        assert asyncio.run(tracker.rebuild_popular()) == 1
        popular = asyncio.run(tracker.popular())
        assert [(link.short_id, link.hits) for link in popular] == [("hot", 25)]

    def test_failures_return_zero(self, unavailable_cache):
        tracker = HitTracker(unavailable_cache)

        assert asyncio.run(tracker.record_hit("abc1234")) == 0
        assert asyncio.run(tracker.popular()) == []
        assert asyncio.run(tracker.rebuild_popular()) == 0


class TestStartupRebuild:

    def test_startup_restores_expired_popularity_markers(self, test_settings, memory_cache):
        container = ServiceContainer(test_settings, cache=memory_cache)
        keys = container.hit_tracker.keys
        asyncio.run(memory_cache.set(keys.hits_key("hot"), "15", ttl=600))
        asyncio.run(memory_cache.set(keys.hits_key("cold"), "3", ttl=600))

        async def run():
            await container.startup()
            try:
                return await container.hit_tracker.popular()
            finally:
                await container.shutdown()

        popular = asyncio.run(run())
        assert [(link.short_id, link.hits) for link in popular] == [("hot", 15)]

    def test_startup_skips_rebuild_without_cache(self, test_settings, unavailable_cache):
        container = ServiceContainer(test_settings, cache=unavailable_cache)

        async def run():
            await container.startup()
            await container.shutdown()

        asyncio.run(run())
        assert unavailable_cache.calls == 0
