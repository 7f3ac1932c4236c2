"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import query, service

router = APIRouter()


@router.get("/users")
async def list_users(
    limit: int | None = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    search: str | None = Query(default=None, max_length=255),
    country: str | None = Query(default=None, max_length=100),
    company: str | None = Query(default=None, max_length=200),
) -> dict:
    """
    List users, newest first. Without `limit` every match is returned.
    """
    filters = query.UserFilters(
        search=search,
        country=country,
        company=company,
        limit=limit,
        offset=offset,
    )
    return await service.list_users(filters)


@router.get("/users/{user_id}")
async def get_user(user_id: str) -> dict:
    return await service.get_user(user_id)
