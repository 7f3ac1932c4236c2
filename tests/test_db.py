from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any

import pytest

from core import db
from users import repository
from users.query import Statement


class _FakeConnection:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    async def fetchval(self, sql: str, *args: Any) -> Any:
        if self.fail:
            raise ConnectionRefusedError("db down")
        return 1


class _AcquireContext(AbstractAsyncContextManager[_FakeConnection]):
    def __init__(self, pool: "_FakePool") -> None:
        self._pool = pool

    async def __aenter__(self) -> _FakeConnection:
        self._pool.checked_out += 1
        return self._pool.conn

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        del exc_type, exc, tb
        self._pool.checked_out -= 1
        return False


class _FakePool:
    def __init__(self, rows: list[dict[str, Any]] | None = None, fail: bool = False) -> None:
        self.rows = rows or []
        self.conn = _FakeConnection(fail=fail)
        self.checked_out = 0
        self.calls: list[tuple[str, str, tuple]] = []

    def acquire(self) -> _AcquireContext:
        return _AcquireContext(self)

    async def fetch(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(("fetch", sql, args))
        return self.rows

    async def fetchrow(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append(("fetchrow", sql, args))
        return self.rows[0] if self.rows else None

    async def fetchval(self, sql: str, *args: Any) -> Any:
        self.calls.append(("fetchval", sql, args))
        return len(self.rows)


@pytest.fixture
def fake_pool(monkeypatch) -> _FakePool:
    pool = _FakePool(rows=[{"id": 1}, {"id": 2}])
    monkeypatch.setattr(db, "_pool", pool)
    return pool


def test_database_url_strips_sslmode(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/app?sslmode=require&application_name=api")
    assert db.database_url() == "postgresql://u:p@db:5432/app?application_name=api"


def test_database_url_from_parts(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "pg")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_USER", "reader")
    monkeypatch.setenv("DB_PASSWORD", "p@ss word")
    monkeypatch.setenv("DB_NAME", "people")
    assert db.database_url() == "postgresql://reader:p%40ss%20word@pg:6543/people"


def test_database_url_defaults(monkeypatch) -> None:
    for name in ("DATABASE_URL", "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME"):
        monkeypatch.delenv(name, raising=False)
    assert db.database_url() == "postgresql://postgres@localhost:5432/user_management"


def test_pool_must_be_initialized(monkeypatch) -> None:
    monkeypatch.setattr(db, "_pool", None)
    with pytest.raises(RuntimeError):
        db.pool()


@pytest.mark.asyncio
async def test_init_and_close_pool(monkeypatch) -> None:
    created: dict[str, Any] = {}

    class _ClosablePool(_FakePool):
        closed = False

        async def close(self) -> None:
            self.closed = True

    async def fake_create_pool(**kwargs: Any) -> _ClosablePool:
        created.update(kwargs)
        return _ClosablePool()

    monkeypatch.setattr(db, "_pool", None)
    monkeypatch.setattr(db.asyncpg, "create_pool", fake_create_pool)
    monkeypatch.setenv("DATABASE_URL", "postgresql://u@h/d")
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "2")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "8")
    monkeypatch.delenv("DB_COMMAND_TIMEOUT", raising=False)

    await db.init_pool()
    pool = db.pool()
    await db.init_pool()  # idempotent
    assert db.pool() is pool
    assert created == {"dsn": "postgresql://u@h/d", "min_size": 2, "max_size": 8, "command_timeout": 30.0}

    await db.close_pool()
    assert pool.closed is True
    assert db._pool is None


@pytest.mark.asyncio
async def test_repository_runs_statements_through_pool(fake_pool: _FakePool) -> None:
    statement = Statement(sql="SELECT 1 WHERE $1", params=("x",))

    assert await repository.fetch_users(statement) == [{"id": 1}, {"id": 2}]
    assert await repository.count_users(statement) == 2
    assert await repository.fetch_user(statement) == {"id": 1}
    assert [c[0] for c in fake_pool.calls] == ["fetch", "fetchval", "fetchrow"]
    assert all(c[2] == ("x",) for c in fake_pool.calls)


@pytest.mark.asyncio
async def test_count_of_empty_result_is_zero(monkeypatch) -> None:
    pool = _FakePool()

    async def none_value(sql: str, *args: Any) -> Any:
        return None

    pool.fetchval = none_value  # type: ignore[method-assign]
    monkeypatch.setattr(db, "_pool", pool)
    assert await repository.count_users(Statement(sql="SELECT count(*)")) == 0


@pytest.mark.asyncio
async def test_ping_releases_connection(fake_pool: _FakePool) -> None:
    assert await db.ping() is True
    assert fake_pool.checked_out == 0


@pytest.mark.asyncio
async def test_ping_reports_failure(monkeypatch) -> None:
    pool = _FakePool(fail=True)
    monkeypatch.setattr(db, "_pool", pool)
    assert await db.ping() is False
    assert pool.checked_out == 0
