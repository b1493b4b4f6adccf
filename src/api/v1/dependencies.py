"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

import structlog
from fastapi import Query

from api.v1.schemas.member import MembersQueryParams
from core.config import settings
from domain.entities.member import MemberQuery
from domain.services.member_service import MemberService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_member_service() -> MemberService:
    """Get Member service instance."""
    return MemberService(
        get_uow_factory(),
        collection=settings.members_collection,
        logger=structlog.get_logger("members"),
    )


def get_member_query(
    limit: str | None = Query(None, description="Page size, 1-100 (default 10)"),
    offset: str | None = Query(None, description="Records to skip (default 0)"),
    active: str | None = Query(None, description="Filter on the active flag"),
    search: str | None = Query(None, description="Case-insensitive name prefix"),
    sort_by: str | None = Query(
        None,
        alias="sortBy",
        description="joinDate, lastActive, firstName, lastName or email",
    ),
    sort_order: str | None = Query(
        None,
        alias="sortOrder",
        description="asc or desc; anything else means desc",
    ),
    page: str | None = Query(None, description="Accepted for older clients"),
) -> MemberQuery:
    """Collect raw query values and validate them in one pass.

    Parameters arrive as strings so every invalid field is reported
    together instead of stopping at the first.
    """
    raw = {
        "limit": limit,
        "offset": offset,
        "active": active,
        "search": search,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "page": page,
    }
    params = MembersQueryParams.from_query({k: v for k, v in raw.items() if v is not None})
    return params.to_domain()
