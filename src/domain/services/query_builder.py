"""Translate member listing parameters into a document query."""

from domain.entities.member import MemberQuery, SortOrder
from domain.entities.query import DocumentQuery, FilterOp
from domain.services.member_mapping import get_sort_field

# Private-use codepoint sorting after any character a name can contain.
# ``[term, term + PREFIX_SENTINEL)`` matches every value starting with term.
PREFIX_SENTINEL = "\uf8ff"

SEARCH_FIELD = "searchName"
ACTIVE_FIELD = "Active"


def prefix_range(term: str) -> tuple[str, str]:
    """Lower and upper bound of a case-insensitive prefix search."""
    lowered = term.lower()
    return lowered, lowered + PREFIX_SENTINEL


def build_filter_query(collection: str, params: MemberQuery) -> DocumentQuery:
    """Filters for a member listing, without ordering or pagination."""
    query = DocumentQuery(collection=collection)

    if params.active is not None:
        query = query.where(ACTIVE_FIELD, FilterOp.EQ, params.active)

    if params.search:
        lower, upper = prefix_range(params.search)
        query = query.where(SEARCH_FIELD, FilterOp.GTE, lower)
        query = query.where(SEARCH_FIELD, FilterOp.LT, upper)

    return query


def build_member_query(collection: str, params: MemberQuery) -> DocumentQuery:
    """Full member listing query: filters, single-field ordering, one page."""
    descending = params.sort_order != SortOrder.ASC
    return (
        build_filter_query(collection, params)
        .ordered_by(get_sort_field(params.sort_by), descending=descending)
        .paginate(params.limit, params.offset)
    )
