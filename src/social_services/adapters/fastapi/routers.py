"""FastAPI adapter – user listing routes."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from social_services.adapters.fastapi.deps import RawQuery, to_jsonable
from social_services.application.users import UserService


def users_router(service: UserService, tags: list[str] | None = None) -> APIRouter:
    """Return a router exposing the paginated user and admin listings.

    Both routes accept the full list-query vocabulary (``searchTerm``,
    ``sort``, ``page``, ``limit``, ``fields`` and field filters) and answer
    ``{"data": [...], "meta": {...}}``.
    """
    router = APIRouter(tags=tags or ["users"])

    @router.get("/users")
    async def list_users(raw_query: RawQuery) -> Any:
        return to_jsonable(await service.list_users(raw_query))

    @router.get("/admins")
    async def list_admins(raw_query: RawQuery) -> Any:
        return to_jsonable(await service.list_admins(raw_query))

    return router


__all__ = ["users_router"]
