"""Member API routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_member_query, get_member_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.member import (
    MemberListData,
    MemberListResponse,
    MemberResponse,
    PaginationResponse,
)
from core.config import settings
from core.rate_limit import limiter
from core.timestamps import utc_now_z
from domain.entities.member import MemberQuery
from domain.services.member_service import MemberService

router = APIRouter(prefix="/members", tags=["members"])


@router.get(
    "",
    response_model=MemberListResponse,
    summary="List members",
    responses={
        200: {"description": "Paginated member list"},
        400: {"model": ErrorResponse, "description": "Invalid query parameters"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        503: {"model": ErrorResponse, "description": "Document store unavailable"},
    },
)
@limiter.limit(settings.rate_limit)  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    params: MemberQuery = Depends(get_member_query),
    service: MemberService = Depends(get_member_service),
) -> MemberListResponse:
    """List members with optional active/search filters, sorting and paging."""
    page = await service.list_members(params)
    return MemberListResponse(
        data=MemberListData(
            members=[MemberResponse(**asdict(member)) for member in page.members],
            pagination=PaginationResponse(
                total=page.total,
                limit=page.limit,
                offset=page.offset,
                has_more=page.has_more,
            ),
        ),
        timestamp=utc_now_z(),
    )
