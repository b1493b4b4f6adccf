"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from domain.entities.document import new_document_id

# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests).
DocumentPayload = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DocumentModel(Base):
    """A schemaless document in a named collection.

    ``search_name`` mirrors the ``searchName`` key of the payload so prefix
    searches can use an index.
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    collection: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(DocumentPayload, nullable=False, default=dict)
    search_name: Mapped[str | None] = mapped_column(String(512))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_documents_collection", "collection"),
        Index("ix_documents_collection_search_name", "collection", "search_name"),
    )
