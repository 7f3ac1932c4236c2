"""
User persistence (raw SQL, read-only).

Statements come from `users.query`; this module only runs them.
"""

from __future__ import annotations

from typing import Any

from core import db

from .query import Statement


async def fetch_users(statement: Statement) -> list[dict[str, Any]]:
    return await db.fetch_all(statement.sql, *statement.params)


async def count_users(statement: Statement) -> int:
    total = await db.fetch_value(statement.sql, *statement.params)
    return int(total or 0)


async def fetch_user(statement: Statement) -> dict[str, Any] | None:
    return await db.fetch_one(statement.sql, *statement.params)
