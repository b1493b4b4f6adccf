"""Store-neutral query description for document collections."""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Optional


class FilterOp(StrEnum):
    """Comparison operators supported on document fields."""

    EQ = "=="
    GTE = ">="
    LT = "<"
    LTE = "<="


@dataclass(frozen=True, slots=True)
class FieldFilter:
    """A single ``field <op> value`` condition."""

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True, slots=True)
class OrderBy:
    """Single-field ordering."""

    field: str
    descending: bool = False


@dataclass(frozen=True)
class DocumentQuery:
    """Filters, ordering and pagination to run against one collection.

    Filters are ANDed. Ordering and pagination are applied after filtering.
    """

    collection: str
    filters: tuple[FieldFilter, ...] = ()
    order_by: Optional[OrderBy] = None
    limit: Optional[int] = None
    offset: int = 0

    def where(self, field_name: str, op: FilterOp, value: Any) -> "DocumentQuery":
        """Return a copy with one more filter."""
        return replace(self, filters=(*self.filters, FieldFilter(field_name, op, value)))

    def ordered_by(self, field_name: str, descending: bool = False) -> "DocumentQuery":
        """Return a copy ordered by a single field."""
        return replace(self, order_by=OrderBy(field_name, descending))

    def paginate(self, limit: int, offset: int = 0) -> "DocumentQuery":
        """Return a copy restricted to one page."""
        return replace(self, limit=limit, offset=offset)

    def filters_only(self) -> "DocumentQuery":
        """Return a copy with the same filters but no ordering or pagination."""
        return replace(self, order_by=None, limit=None, offset=0)
