"""Dependency injection for FastAPI endpoints.

Controllers receive shared resources through these dependencies instead of
reading module-level state directly.

Usage in controllers:
    from schedule_api.dependencies import OptionalScheduleCache

    @router.get("/example")
    async def example(cache: OptionalScheduleCache):
        ...
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from schedule_api import state
from schedule_api.cache import ScheduleCache
from schedule_api.config import OptimizerSettings, get_settings
from schedule_api.errors import ServiceUnavailableError


def get_optional_redis() -> redis.Redis | None:
    """Get the Redis client if available, or None."""
    return state.redis_client


def get_optional_schedule_cache() -> ScheduleCache | None:
    """Get a schedule cache over the Redis client, or None when caching is off."""
    settings = get_settings()
    if state.redis_client is None or not settings.features.cache:
        return None
    return ScheduleCache(state.redis_client, ttl_sec=settings.optimizer.cache_ttl_sec)


def require_database() -> None:
    """Fail fast with 503 while the database pool is not up."""
    if not state.db_enabled:
        raise ServiceUnavailableError(detail="Database not connected")


def get_optimizer_settings() -> OptimizerSettings:
    return get_settings().optimizer


OptionalRedis = Annotated[redis.Redis | None, Depends(get_optional_redis)]
OptionalScheduleCache = Annotated[ScheduleCache | None, Depends(get_optional_schedule_cache)]
Optimizer = Annotated[OptimizerSettings, Depends(get_optimizer_settings)]
