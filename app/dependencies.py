"""
Shared endpoint dependencies.

Auth dependencies live in app.routers.auth_deps and are re-exported here
next to the list-endpoint query parser.
"""
from typing import Optional

from fastapi import Query

from app.core.config import settings
from app.core.schemas import PaginationQuery, SortOrder
from app.models.user import User, UserRole
from app.routers.auth_deps import (
    get_current_user,
    require_admin,
    require_hr,
    require_role,
)


def get_pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    search: Optional[str] = Query(None),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
) -> PaginationQuery:
    """`page`, `limit`, `search`, `sortBy`, `sortOrder`; limit is capped at settings.max_page_size."""
    return PaginationQuery(
        page=page,
        limit=min(limit, settings.max_page_size),
        search=search or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )


__all__ = [
    "get_current_user",
    "get_pagination",
    "require_role",
    "require_hr",
    "require_admin",
    "User",
    "UserRole",
]
