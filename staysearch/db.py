"""
Property store connection pool.
"""

import asyncpg
from typing import Any, List, Optional
import logging

from staysearch.config import get_search_settings
from staysearch.config.search_config import DatabaseConfig

logger = logging.getLogger(__name__)

# Global connection pool
pg_pool: Optional[asyncpg.Pool] = None

# True once close_db() has run; the pool is not reopened implicitly
_closed = False


class DatabaseNotReadyError(RuntimeError):
    """The pool has not been initialized or has already been closed."""


async def init_db(config: Optional[DatabaseConfig] = None):
    """Initialize the PostgreSQL connection pool"""
    global pg_pool, _closed

    config = config or get_search_settings().database
    try:
        pg_pool = await asyncpg.create_pool(
            config.url,
            min_size=config.min_pool_size,
            max_size=config.max_pool_size,
            max_inactive_connection_lifetime=config.idle_timeout_seconds,
            timeout=config.connect_timeout_seconds,
        )
        _closed = False
        logger.info("PostgreSQL connection pool created")
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


async def close_db():
    """Close the connection pool. Safe to call more than once."""
    global pg_pool, _closed

    _closed = True
    if pg_pool is None:
        return

    pool, pg_pool = pg_pool, None
    try:
        await pool.close()
        logger.info("PostgreSQL connection pool closed")
    except Exception as e:
        logger.error(f"Error closing PostgreSQL pool: {e}")
        raise


def is_closed() -> bool:
    """Whether close_db() has been called since the last init_db()."""
    return _closed


def get_pg_pool() -> asyncpg.Pool:
    """Get PostgreSQL connection pool"""
    if _closed:
        raise DatabaseNotReadyError("Database pool is closed")
    if pg_pool is None:
        raise DatabaseNotReadyError("Database not initialized")
    return pg_pool


async def fetch(text: str, *values: Any) -> List[asyncpg.Record]:
    """
    Run a parameterized query and return all rows.

    Uses $1, $2, ... placeholders; every value is bound, never interpolated.

    Args:
        text: SQL text
        *values: Bound parameter values in placeholder order

    Returns:
        List of asyncpg records
    """
    pool = get_pg_pool()
    async with pool.acquire() as conn:
        return await conn.fetch(text, *values)
