"""Member domain entities."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional


class SortField(StrEnum):
    """Public field names a member listing can be sorted by."""

    JOIN_DATE = "joinDate"
    LAST_ACTIVE = "lastActive"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"


class SortOrder(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass
class Member:
    """Public, read-only view of a member document.

    Every field has a total default: strings default to ``""``, lists to
    ``[]``, flags to ``False`` and counters to ``0``. Only the three date
    fields may be ``None``.
    """

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    bio: str = ""
    headline: str = ""
    location: str = ""
    tags: list[str] = field(default_factory=list)
    join_date: Optional[str] = None
    last_active: Optional[str] = None
    invitation_date: Optional[str] = None
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


@dataclass(frozen=True, slots=True)
class MemberQuery:
    """Normalized parameters for a member listing."""

    limit: int = 10
    offset: int = 0
    active: Optional[bool] = None
    search: Optional[str] = None
    sort_by: str = SortField.JOIN_DATE.value
    sort_order: SortOrder = SortOrder.DESC


@dataclass(frozen=True, slots=True)
class MemberPage:
    """Read-only value object: one page of members plus pagination data."""

    members: list[Member]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        """True when records exist beyond this page."""
        return self.total > self.offset + len(self.members)
