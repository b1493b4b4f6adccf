"""Document repository protocol."""

from typing import Protocol

from domain.entities.document import Document
from domain.entities.query import DocumentQuery


class IDocumentRepository(Protocol):
    """Repository interface for schemaless documents grouped in collections."""

    async def find(self, query: DocumentQuery) -> list[Document]:
        """Run a query and return the matching documents."""
        ...

    async def count(self, query: DocumentQuery) -> int:
        """Count documents matching the query filters.

        Ordering and pagination on ``query`` are ignored. Implementations
        without an aggregate count raise ``NotImplementedError``.
        """
        ...

    async def get_all(self, collection: str) -> list[Document]:
        """Get every document of a collection."""
        ...

    async def add_many(self, documents: list[Document]) -> int:
        """Stage documents for insertion and return how many were added."""
        ...

    async def delete_batch(self, collection: str, batch_size: int) -> int:
        """Delete up to ``batch_size`` documents and return how many went."""
        ...
