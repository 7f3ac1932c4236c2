"""
Environment-backed settings.

Every setting is read on call (not cached) so tests can monkeypatch the
environment. Blank values fall back to the default.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def env_list(name: str, default: tuple[str, ...] = ()) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def db_pool_min_size() -> int:
    return max(0, env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    # asyncpg rejects max_size < min_size.
    return max(db_pool_min_size(), env_int("DB_POOL_MAX_SIZE", 10), 1)


def db_command_timeout() -> float:
    return float(max(1, env_int("DB_COMMAND_TIMEOUT", 30)))


def cors_origins() -> list[str]:
    return env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def log_json() -> bool:
    return env_bool("LOG_JSON", False)
