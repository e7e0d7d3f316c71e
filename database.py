import json
import logging

import asyncpg
from config import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE

pool = None


async def _init_connection(conn):
    # exp_history is stored as JSONB {"YYYY-MM-DD": exp}
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


async def create_pool(dsn: str = None):
    global pool
    if pool is None:
        dsn = dsn or DATABASE_URL
        if not dsn:
            raise RuntimeError("DATABASE_URL is not set. Check .env")
        pool = await asyncpg.create_pool(
            dsn,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            init=_init_connection,
        )
        logging.info("✅ Database pool created")
    return pool


async def close_pool():
    global pool
    if pool:
        await pool.close()
        pool = None
        logging.info("🔒 Database pool closed")


async def get_pool():
    global pool
    if pool is None:
        raise RuntimeError("Database pool is not initialized! Call create_pool() first.")
    return pool
