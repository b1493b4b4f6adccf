"""Pydantic schemas for Member API."""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from api.v1.schemas.common import validation_details
from core.exceptions import RequestValidationFailedError
from domain.entities.member import MemberQuery, SortField, SortOrder

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0"})
_INTEGER = re.compile(r"[+-]?[0-9]+")


class MembersQueryParams(BaseModel):
    """Query string of ``GET /api/members``.

    ``sortOrder`` never fails: unknown values become ``desc``. ``page`` is
    accepted from older clients and only validated.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    limit: int = Field(10, ge=1, le=100)
    offset: int = Field(0, ge=0)
    page: int | None = Field(None, ge=1)
    active: bool | None = None
    search: str | None = None
    sort_by: SortField = Field(SortField.JOIN_DATE, alias="sortBy")
    sort_order: SortOrder = Field(SortOrder.DESC, alias="sortOrder")

    @field_validator("limit", "offset", "page", mode="before")
    @classmethod
    def require_integer(cls, v: Any) -> Any:
        # Lax int parsing would accept "1.0" or "5_0"
        if isinstance(v, str) and not _INTEGER.fullmatch(v):
            raise ValueError("Value must be an integer")
        return v

    @field_validator("active", mode="before")
    @classmethod
    def parse_active(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return v
        text = str(v).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValueError("Active must be true or false")

    @field_validator("search")
    @classmethod
    def validate_search(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Search parameter cannot be empty")
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def fallback_sort_order(cls, v: Any) -> Any:
        return v if v in (SortOrder.ASC, SortOrder.DESC) else SortOrder.DESC

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> "MembersQueryParams":
        """Validate raw query values, reporting every failing field at once."""
        try:
            return cls.model_validate(dict(query))
        except ValidationError as exc:
            raise RequestValidationFailedError(validation_details(exc.errors())) from exc

    def to_domain(self) -> MemberQuery:
        return MemberQuery(
            limit=self.limit,
            offset=self.offset,
            active=self.active,
            search=self.search,
            sort_by=self.sort_by.value,
            sort_order=self.sort_order,
        )


class MemberResponse(BaseModel):
    """Schema for the public member representation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f9c1a7be2d54c0e9a51f0d2c4b8e6a1",
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane@example.com",
                "joinDate": "2024-01-01T00:00:00.000Z",
                "active": True,
                "posts": 3,
            }
        },
    )

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    bio: str = ""
    headline: str = ""
    location: str = ""
    tags: list[str] = Field(default_factory=list)
    join_date: str | None = None
    last_active: str | None = None
    invitation_date: str | None = None
    active: bool = False
    email_marketing: bool = False
    member: bool = False
    profile_url: str = ""
    website_url: str = ""
    twitter_url: str = ""
    facebook_url: str = ""
    linkedin_url: str = ""
    instagram_url: str = ""
    posts: int = 0
    comments: int = 0
    likes_received: int = 0
    avatar_url: str = ""


class PaginationResponse(BaseModel):
    """Pagination envelope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    limit: int
    offset: int
    has_more: bool


class MemberListData(BaseModel):
    """One page of members."""

    members: list[MemberResponse]
    pagination: PaginationResponse


class MemberListResponse(BaseModel):
    """Schema for paginated member list response."""

    success: bool = True
    data: MemberListData
    timestamp: str
