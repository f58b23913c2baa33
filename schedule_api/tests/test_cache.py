"""Tests for the Redis schedule cache."""

from unittest.mock import AsyncMock, MagicMock

import fakeredis
import fakeredis.aioredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from schedule_api.cache import ScheduleCache

RESULT = {"suggested_schedule": [], "metrics": {"total_weighted_score": 1.5}}


@pytest.fixture
def redis_client():
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


class TestScheduleCache:
    """Tests for ScheduleCache against fakeredis."""

    def test_keys(self):
        assert ScheduleCache.key("abc", 2, 3) == "schedule:abc:2:3"
        assert ScheduleCache.generation_key("abc") == "schedule_gen:abc"

    @pytest.mark.asyncio
    async def test_miss(self, redis_client):
        cache = ScheduleCache(redis_client)
        assert await cache.generation("abc") == 0
        assert await cache.get("abc", 0, 1) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, redis_client):
        cache = ScheduleCache(redis_client, ttl_sec=120)
        assert await cache.set("abc", 0, 1, RESULT) is True
        assert await cache.get("abc", 0, 1) == RESULT
        assert await cache.get("abc", 0, 2) is None
        ttl = await redis_client.ttl("schedule:abc:0:1")
        assert 0 < ttl <= 120

    @pytest.mark.asyncio
    async def test_invalidate_drops_every_session_count(self, redis_client):
        cache = ScheduleCache(redis_client)
        await cache.set("abc", 0, 1, RESULT)
        await cache.set("abc", 0, 3, RESULT)
        await cache.set("abcd", 0, 1, RESULT)

        assert await cache.invalidate("abc") == 2
        assert await cache.generation("abc") == 1
        assert await cache.get("abc", 0, 1) is None
        assert await cache.get("abc", 0, 3) is None
        assert await cache.get("abcd", 0, 1) == RESULT
        assert await cache.generation("abcd") == 0

    @pytest.mark.asyncio
    async def test_invalidate_nothing_cached(self, redis_client):
        cache = ScheduleCache(redis_client)
        assert await cache.invalidate("abc") == 0
        assert await cache.generation("abc") == 1

    @pytest.mark.asyncio
    async def test_result_from_an_older_generation_is_not_stored(self, redis_client):
        """A schedule computed before an invalidation must not be cached."""
        cache = ScheduleCache(redis_client)
        generation = await cache.generation("abc")
        await cache.invalidate("abc")

        assert await cache.set("abc", generation, 1, RESULT) is False
        assert await cache.get("abc", generation, 1) is None
        assert await cache.get("abc", await cache.generation("abc"), 1) is None
        assert await redis_client.keys("schedule:*") == []

    @pytest.mark.asyncio
    async def test_redis_errors_degrade_to_miss(self):
        broken = MagicMock()
        broken.get = AsyncMock(side_effect=RedisConnectionError("down"))
        broken.setex = AsyncMock()
        broken.incr = AsyncMock(side_effect=RedisConnectionError("down"))
        cache = ScheduleCache(broken)

        assert await cache.generation("abc") is None
        assert await cache.get("abc", 0, 1) is None
        assert await cache.set("abc", 0, 1, RESULT) is False
        broken.setex.assert_not_awaited()
        assert await cache.invalidate("abc") == 0
