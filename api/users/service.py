"""
User listing and lookup (orchestration).

This is where we:
- build one filter predicate and derive the fetch and count statements from it
- run both through the repository
- reshape rows into nested user records and add paging metadata

Failures are raised as the domain errors in `core.errors` (`InvalidInput`,
`NotFound`, `StoreUnavailable`); the app turns them into HTTP responses.
Store failures are logged here first.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from core import db
from core.errors import InvalidInput, NotFound, StoreUnavailable

from . import query, repository, schemas, transform

logger = logging.getLogger(__name__)

# Largest value a BIGINT id column can hold.
MAX_USER_ID = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+")


def pagination(*, total: int, limit: int, offset: int) -> dict[str, Any]:
    return {
        "hasMore": offset + limit < total,
        "page": offset // limit + 1,
        "totalPages": math.ceil(total / limit),
    }


def _filters_present(filters: query.UserFilters) -> str:
    # Names only; filter values can be personal data and stay out of the logs.
    names = [name for name in ("search", "country", "company") if getattr(filters, name)]
    return ",".join(names) or "-"


async def list_users(filters: query.UserFilters) -> dict[str, Any]:
    predicate = query.build_predicate(filters)
    limit = filters.limit
    skip = filters.offset if limit is not None else 0

    fetch = query.select_statement(predicate, limit=limit, offset=skip)
    count = query.count_statement(predicate)

    try:
        rows = await repository.fetch_users(fetch)
        total = await repository.count_users(count)
    except db.STORE_ERRORS as exc:
        logger.exception(
            "user_list_failed filters=%s limit=%s offset=%s",
            _filters_present(filters),
            limit,
            skip,
        )
        raise StoreUnavailable("fetch users from database") from exc

    response: dict[str, Any] = {
        "users": [schemas.served(user) for user in transform.to_users(rows)],
        "total": total,
        "skip": skip,
        "limit": limit if limit is not None else total,
    }
    if limit is not None:
        response.update(pagination(total=total, limit=limit, offset=skip))
    return response


def parse_user_id(raw_id: str | None) -> int:
    """
    Positive integer id from the path segment, or a 400.
    """
    raw = (raw_id or "").strip()
    if not _DIGITS.fullmatch(raw) or int(raw) < 1:
        raise InvalidInput(
            "Invalid user ID",
            field="id",
            message="User ID must be a positive integer.",
        )
    return int(raw)


def _not_found(user_id: int) -> NotFound:
    return NotFound("User not found", message=f"No user found with ID {user_id}")


async def get_user(raw_id: str | None) -> dict[str, Any]:
    user_id = parse_user_id(raw_id)
    if user_id > MAX_USER_ID:
        raise _not_found(user_id)

    try:
        row = await repository.fetch_user(query.by_id_statement(user_id))
    except db.STORE_ERRORS as exc:
        logger.exception("user_fetch_failed user_id=%s", user_id)
        raise StoreUnavailable("fetch user from database") from exc

    if row is None:
        raise _not_found(user_id)
    return schemas.served(transform.to_user(row))
