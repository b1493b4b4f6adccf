"""Mapping between member documents and the public member representation."""

from typing import Any

from core.timestamps import convert_timestamp
from domain.entities.document import Document
from domain.entities.member import Member, MemberPage, SortField

DEFAULT_SORT_FIELD = "JoinDate"

SORT_FIELD_MAP: dict[str, str] = {
    SortField.JOIN_DATE.value: "JoinDate",
    SortField.LAST_ACTIVE.value: "LastActive",
    SortField.FIRST_NAME.value: "FirstName",
    SortField.LAST_NAME.value: "LastName",
    SortField.EMAIL.value: "Email",
}


def get_sort_field(sort_by: str | None) -> str:
    """Map a public sort key to the internal document field.

    Unknown keys fall back to ``JoinDate``.
    """
    if sort_by is None:
        return DEFAULT_SORT_FIELD
    return SORT_FIELD_MAP.get(sort_by, DEFAULT_SORT_FIELD)


def _text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def _flag(value: Any) -> bool:
    return bool(value)


def _count(value: Any) -> int:
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(number, 0)


def _tags(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return [str(tag) for tag in value]


def to_member(document: Document) -> Member:
    """Build the public member view of a stored document."""
    data = document.data
    return Member(
        id=document.id,
        first_name=_text(data.get("FirstName")),
        last_name=_text(data.get("LastName")),
        email=_text(data.get("Email")),
        bio=_text(data.get("Bio")),
        headline=_text(data.get("Headline")),
        location=_text(data.get("Location")),
        tags=_tags(data.get("Tags")),
        join_date=convert_timestamp(data.get("JoinDate")),
        last_active=convert_timestamp(data.get("LastActive")),
        invitation_date=convert_timestamp(data.get("InvitationDate")),
        active=_flag(data.get("Active")),
        email_marketing=_flag(data.get("EmailMarketing")),
        member=_flag(data.get("Member")),
        profile_url=_text(data.get("ProfileURL")),
        website_url=_text(data.get("WebsiteURL")),
        twitter_url=_text(data.get("TwitterURL")),
        facebook_url=_text(data.get("FacebookURL")),
        linkedin_url=_text(data.get("LinkedInURL")),
        instagram_url=_text(data.get("InstagramURL")),
        posts=_count(data.get("Posts")),
        comments=_count(data.get("Comments")),
        likes_received=_count(data.get("LikesReceived")),
        avatar_url=_text(data.get("AvatarURL")),
    )


def assemble_page(
    documents: list[Document], total: int, limit: int, offset: int
) -> MemberPage:
    """Map documents to members and wrap them with pagination data."""
    return MemberPage(
        members=[to_member(doc) for doc in documents],
        total=total or 0,
        limit=limit,
        offset=offset,
    )
