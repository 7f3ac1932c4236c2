"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper checks a connection out of the pool for the duration of one
statement; asyncpg returns it to the pool on success and on error.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

# Failures that mean "the store could not answer", as opposed to programming errors.
STORE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _url_from_parts() -> str:
    user = quote(config.env_str("DB_USER", "postgres"), safe="")
    password = quote(config.env_str("DB_PASSWORD", ""), safe="")
    host = config.env_str("DB_HOST", "localhost")
    port = config.env_int("DB_PORT", 5432)
    name = config.env_str("DB_NAME", "user_management")
    credentials = f"{user}:{password}" if password else user
    return f"postgresql://{credentials}@{host}:{port}/{name}"


def database_url() -> str:
    """
    DATABASE_URL wins; otherwise the DSN is assembled from DB_HOST, DB_PORT,
    DB_USER, DB_PASSWORD and DB_NAME.
    """
    url = config.env_str("DATABASE_URL")
    if not url:
        return _url_from_parts()
    return _sanitize_database_url(url)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=config.db_pool_min_size(),
        max_size=config.db_pool_max_size(),
        command_timeout=config.db_command_timeout(),
    )
    logger.info(
        "db_pool_ready min_size=%s max_size=%s",
        config.db_pool_min_size(),
        config.db_pool_max_size(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_value(sql: str, *args: Any) -> Any:
    """
    Run a query and return the first column of the first row (or None).
    """
    return await pool().fetchval(sql, *args)


async def ping() -> bool:
    """
    True when a pooled connection can run a trivial query.
    """
    if _pool is None:
        return False
    try:
        async with _pool.acquire() as conn:  # type: asyncpg.Connection
            await conn.fetchval("SELECT 1")
    except STORE_ERRORS:
        logger.warning("db_ping_failed", exc_info=True)
        return False
    return True
