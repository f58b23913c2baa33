"""Tests for the database connection pool module."""

from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
import pytest


@pytest.fixture
def no_pool():
    with patch("schedule_api.db.core._pool", None):
        yield


class TestPoolLifecycle:
    """Tests for init_pool and close_pool."""

    @pytest.mark.asyncio
    async def test_init_pool_opens_and_migrates(self, no_pool):
        from schedule_api.db import core

        pool = MagicMock()
        pool.open = AsyncMock()
        with patch("schedule_api.db.core.AsyncConnectionPool", return_value=pool) as pool_class, \
             patch("schedule_api.db.schema._ensure_schema", new_callable=AsyncMock) as ensure:
            await core.init_pool()

            pool_class.assert_called_once()
            assert pool_class.call_args.kwargs["open"] is False
            pool.open.assert_awaited_once()
            ensure.assert_awaited_once()
            assert core._pool is pool

    @pytest.mark.asyncio
    async def test_init_pool_closes_pool_when_schema_fails(self, no_pool):
        from schedule_api.db import core

        pool = MagicMock()
        pool.open = AsyncMock()
        pool.close = AsyncMock()
        with patch("schedule_api.db.core.AsyncConnectionPool", return_value=pool), \
             patch("schedule_api.db.schema._ensure_schema", new_callable=AsyncMock) as ensure:
            ensure.side_effect = psycopg.errors.SyntaxError("bad migration")

            with pytest.raises(psycopg.errors.SyntaxError):
                await core.init_pool()

            pool.close.assert_awaited_once()
            assert core._pool is None
            assert core.get_pool_stats() == {"status": "not_initialized"}

    @pytest.mark.asyncio
    async def test_init_pool_is_idempotent(self):
        from schedule_api.db import core

        existing = MagicMock()
        with patch("schedule_api.db.core._pool", existing), \
             patch("schedule_api.db.core.AsyncConnectionPool") as pool_class:
            await core.init_pool()
            pool_class.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_pool(self):
        from schedule_api.db import core

        pool = MagicMock()
        pool.close = AsyncMock()
        with patch("schedule_api.db.core._pool", pool):
            await core.close_pool()
            pool.close.assert_awaited_once()
            assert core._pool is None


class TestPoolStats:
    """Tests for get_pool_stats."""

    def test_not_initialized(self, no_pool):
        from schedule_api.db.core import get_pool_stats

        assert get_pool_stats() == {"status": "not_initialized"}

    def test_active_pool(self):
        from schedule_api.db.core import get_pool_stats

        pool = MagicMock()
        pool.get_stats.return_value = {
            "pool_size": 4,
            "pool_available": 3,
            "requests_waiting": 0,
            "pool_min": 2,
            "pool_max": 10,
        }
        with patch("schedule_api.db.core._pool", pool):
            assert get_pool_stats() == {
                "status": "active",
                "size": 4,
                "available": 3,
                "waiting": 0,
                "min_size": 2,
                "max_size": 10,
            }


class TestPing:
    """Tests for ping."""

    def _connection(self, conn):
        cm = MagicMock()
        cm.__aenter__ = AsyncMock(return_value=conn)
        cm.__aexit__ = AsyncMock(return_value=None)
        return cm

    @pytest.mark.asyncio
    async def test_reachable(self):
        from schedule_api.db.core import ping

        conn = MagicMock()
        conn.execute = AsyncMock()
        with patch("schedule_api.db.core._get_connection", return_value=self._connection(conn)):
            assert await ping() is True
        conn.execute.assert_awaited_once_with("SELECT 1")

    @pytest.mark.asyncio
    async def test_unreachable(self):
        from schedule_api.db.core import ping

        with patch("schedule_api.db.core._get_connection", side_effect=psycopg.OperationalError("refused")):
            assert await ping() is False
