"""Document domain entity."""

from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4


def new_document_id() -> str:
    """Generate an opaque document id."""
    return uuid4().hex


@dataclass
class Document:
    """A schemaless record stored in a named collection."""

    collection: str
    data: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_document_id)
