"""Redis cache of computed schedules, keyed by event, generation and session count.

Each event has a generation counter that ``invalidate`` bumps. Schedules are
stored under the generation that was current when their responses were read,
so a result computed from responses that have since changed is never served.
"""

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger("schedule_api.cache")

KEY_PREFIX = "schedule:"
GENERATION_PREFIX = "schedule_gen:"


class ScheduleCache:
    def __init__(self, redis_client: redis.Redis, ttl_sec: int = 300):
        self.redis_client = redis_client
        self.ttl_sec = ttl_sec

    @staticmethod
    def key(event_id: str, generation: int, sessions: int) -> str:
        return f"{KEY_PREFIX}{event_id}:{generation}:{sessions}"

    @staticmethod
    def generation_key(event_id: str) -> str:
        return f"{GENERATION_PREFIX}{event_id}"

    async def generation(self, event_id: str) -> int | None:
        """Current generation for ``event_id``; None when redis is unreachable."""
        try:
            raw = await self.redis_client.get(self.generation_key(event_id))
        except RedisError as e:
            logger.warning("Schedule generation read failed event=%s: %s", event_id, e)
            return None
        return int(raw) if raw is not None else 0

    async def get(self, event_id: str, generation: int, sessions: int) -> dict[str, Any] | None:
        try:
            raw = await self.redis_client.get(self.key(event_id, generation, sessions))
        except RedisError as e:
            logger.warning("Schedule cache read failed event=%s: %s", event_id, e)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, event_id: str, generation: int, sessions: int, result: dict[str, Any]) -> bool:
        """Store ``result`` unless the event moved past ``generation``; returns whether it was stored."""
        try:
            current = await self.generation(event_id)
            if current is None:
                return False
            if current != generation:
                logger.info(
                    "Schedule for event=%s is stale (generation %s, now %s), not caching",
                    event_id, generation, current,
                )
                return False
            await self.redis_client.setex(
                self.key(event_id, generation, sessions), self.ttl_sec, json.dumps(result)
            )
            return True
        except RedisError as e:
            logger.warning("Schedule cache write failed event=%s: %s", event_id, e)
            return False

    async def invalidate(self, event_id: str) -> int:
        """Bump the generation and drop cached schedules for ``event_id``; returns the number of keys removed."""
        try:
            await self.redis_client.incr(self.generation_key(event_id))
            keys = [k async for k in self.redis_client.scan_iter(match=f"{KEY_PREFIX}{event_id}:*")]
            if not keys:
                return 0
            return await self.redis_client.delete(*keys)
        except RedisError as e:
            logger.warning("Schedule cache invalidation failed event=%s: %s", event_id, e)
            return 0
