"""Tests for the property store connection pool."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from staysearch import db
from staysearch.config.search_config import DatabaseConfig


@pytest.fixture(autouse=True)
def reset_pool():
    db.pg_pool = None
    db._closed = False
    yield
    db.pg_pool = None
    db._closed = False


def make_pool(rows=None):
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=rows or [])
    acquire = MagicMock()
    acquire.__aenter__ = AsyncMock(return_value=conn)
    acquire.__aexit__ = AsyncMock(return_value=False)
    pool = MagicMock()
    pool.acquire.return_value = acquire
    pool.close = AsyncMock()
    return pool, conn


def test_pool_required_before_init():
    with pytest.raises(db.DatabaseNotReadyError):
        db.get_pg_pool()


@pytest.mark.asyncio
async def test_init_uses_configured_pool_bounds():
    pool, _ = make_pool()
    config = DatabaseConfig(url="postgresql://u:p@db:5432/stays", min_pool_size=1, max_pool_size=7)

    with patch("staysearch.db.asyncpg.create_pool", new=AsyncMock(return_value=pool)) as create_pool:
        await db.init_db(config)

    create_pool.assert_awaited_once_with(
        "postgresql://u:p@db:5432/stays",
        min_size=1,
        max_size=7,
        max_inactive_connection_lifetime=30.0,
        timeout=5.0,
    )
    assert db.get_pg_pool() is pool
    assert db.is_closed() is False


@pytest.mark.asyncio
async def test_fetch_binds_values():
    pool, conn = make_pool(rows=[{"id": "1"}])
    db.pg_pool = pool

    rows = await db.fetch("SELECT * FROM properties WHERE id = $1", "1")

    assert rows == [{"id": "1"}]
    conn.fetch.assert_awaited_once_with("SELECT * FROM properties WHERE id = $1", "1")


@pytest.mark.asyncio
async def test_close_is_idempotent_and_blocks_queries():
    pool, _ = make_pool()
    db.pg_pool = pool

    await db.close_db()
    await db.close_db()

    pool.close.assert_awaited_once()
    assert db.is_closed() is True
    with pytest.raises(db.DatabaseNotReadyError):
        await db.fetch("SELECT 1")
