"""
Database connection pool and connection manager.

All database access goes through system_conn().
Never use pool.acquire() directly outside this module, except to hand the
pool itself to the kernel's PostgresStorage.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

import asyncpg

from api.config import settings

logger = logging.getLogger(__name__)

pool: asyncpg.Pool | None = None


async def init_pool() -> None:
    """
    Initialize the connection pool.
    Called once at application startup.
    """
    global pool
    pool = await asyncpg.create_pool(
        dsn=settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=60,
        init=_init_connection,
    )


async def close_pool() -> None:
    """
    Close the connection pool.
    Called at application shutdown.
    """
    global pool
    if pool is not None:
        await pool.close()
        pool = None


def get_pool() -> asyncpg.Pool:
    if pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return pool


async def _init_connection(conn: asyncpg.Connection) -> None:
    """
    Initialize each new connection.
    JSON and JSONB columns decode to Python dict/list.
    """
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )
    await conn.set_type_codec(
        "json",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


@asynccontextmanager
async def system_conn():
    """
    Acquire a database connection inside a transaction.

    Usage:
        async with system_conn() as conn:
            row = await conn.fetchrow("SELECT * FROM pages WHERE slug = $1", slug)

    Yields:
        asyncpg.Connection
    """
    async with get_pool().acquire() as conn:
        async with conn.transaction():
            yield conn
