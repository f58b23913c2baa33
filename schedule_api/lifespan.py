"""Application startup and shutdown of shared resources."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import redis.asyncio as redis
from fastapi import FastAPI
from redis.asyncio import BlockingConnectionPool as RedisConnectionPool

from schedule_api import db, state
from schedule_api.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    redis_client: redis.Redis | None = None
    db_enabled: bool = False


def init_redis() -> redis.Redis | None:
    """Build the Redis client over a blocking connection pool, or None when caching is off."""
    settings = get_settings()
    if not settings.features.cache:
        return None

    redis_pool = RedisConnectionPool(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password if settings.redis.password else None,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout_sec,
        health_check_interval=settings.redis.health_check_interval,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
        retry_on_timeout=settings.redis.retry_on_timeout,
        decode_responses=True,
    )
    return redis.Redis(connection_pool=redis_pool)


async def init_database() -> bool:
    """Open the database pool and run migrations.

    Returns:
        True if the database is ready, False if disabled or unreachable.
    """
    if not get_settings().features.db:
        logger.info("Database disabled (ENABLE_DB=0)")
        return False
    try:
        await db.init_pool()
        return True
    except Exception as e:
        logger.warning("Failed to initialize database: %s", e)
        return False


async def setup_resources() -> LifespanResources:
    resources = LifespanResources()
    resources.redis_client = init_redis()
    resources.db_enabled = await init_database()

    state.redis_client = resources.redis_client
    state.db_enabled = resources.db_enabled
    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    if resources.db_enabled:
        try:
            await db.close_pool()
        except Exception as e:
            logger.warning("Failed to close database pool: %s", e)

    if resources.redis_client:
        await resources.redis_client.aclose()

    state.redis_client = None
    state.db_enabled = False


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    resources = await setup_resources()
    try:
        yield
    finally:
        await cleanup_resources(resources)
