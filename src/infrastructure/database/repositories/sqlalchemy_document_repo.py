"""SQLAlchemy implementation of the Document repository."""

import operator
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, List

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ServiceUnavailableError
from domain.entities.document import Document
from domain.entities.query import DocumentQuery, FieldFilter, FilterOp
from infrastructure.database.models import DocumentModel

SEARCH_NAME_KEY = "searchName"

# Connection failures reach us from the driver as bare OSError subclasses.
STORE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, OSError)

_OPERATORS: dict[FilterOp, Callable[[Any, Any], ColumnElement[bool]]] = {
    FilterOp.EQ: operator.eq,
    FilterOp.GTE: operator.ge,
    FilterOp.LT: operator.lt,
    FilterOp.LTE: operator.le,
}


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise driver errors as ServiceUnavailableError."""
    try:
        yield
    except STORE_ERRORS as exc:
        raise ServiceUnavailableError(reason=str(exc) or type(exc).__name__) from exc


def _field(name: str) -> Any:
    if name == SEARCH_NAME_KEY:
        return DocumentModel.search_name
    return DocumentModel.data[name]


def _typed_field(name: str, value: Any) -> Any:
    """Field expression cast to match the Python type of ``value``."""
    column = _field(name)
    if name == SEARCH_NAME_KEY:
        return column
    if isinstance(value, bool):
        return column.as_boolean()
    if isinstance(value, int):
        return column.as_integer()
    if isinstance(value, float):
        return column.as_float()
    return column.as_string()


def _condition(field_filter: FieldFilter) -> ColumnElement[bool]:
    compare = _OPERATORS[field_filter.op]
    return compare(_typed_field(field_filter.field, field_filter.value), field_filter.value)


class SQLAlchemyDocumentRepository:
    """SQLAlchemy implementation of IDocumentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _filtered(self, query: DocumentQuery) -> list[ColumnElement[bool]]:
        conditions = [DocumentModel.collection == query.collection]
        conditions.extend(_condition(f) for f in query.filters)
        return conditions

    async def find(self, query: DocumentQuery) -> List[Document]:
        """Run a query and return the matching documents.

        Ordering falls back to the document id to keep pages stable when
        sort keys are equal.
        """
        stmt = select(DocumentModel).where(*self._filtered(query))

        if query.order_by is not None:
            sort_key = _field(query.order_by.field)
            if query.order_by.field != SEARCH_NAME_KEY:
                sort_key = sort_key.as_string()
            sort_key = sort_key.desc() if query.order_by.descending else sort_key.asc()
            stmt = stmt.order_by(sort_key.nulls_last())
        stmt = stmt.order_by(DocumentModel.id.asc())

        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        if query.offset:
            stmt = stmt.offset(query.offset)

        with translate_errors():
            result = await self._session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars()]

    async def count(self, query: DocumentQuery) -> int:
        """Count documents matching the query filters."""
        stmt = select(func.count()).select_from(DocumentModel).where(*self._filtered(query))
        with translate_errors():
            result = await self._session.execute(stmt)
            return int(result.scalar_one())

    async def get_all(self, collection: str) -> List[Document]:
        """Get every document of a collection in insertion order."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection)
            .order_by(DocumentModel.created_at.asc(), DocumentModel.id.asc())
        )
        with translate_errors():
            result = await self._session.execute(stmt)
            return [self._to_entity(model) for model in result.scalars()]

    async def add_many(self, documents: List[Document]) -> int:
        """Stage documents for insertion; the unit of work commits them."""
        models = [self._to_model(doc) for doc in documents]
        with translate_errors():
            self._session.add_all(models)
            await self._session.flush()
        return len(models)

    async def delete_batch(self, collection: str, batch_size: int) -> int:
        """Delete up to ``batch_size`` documents of a collection."""
        ids_stmt = (
            select(DocumentModel.id)
            .where(DocumentModel.collection == collection)
            .limit(batch_size)
        )
        with translate_errors():
            result = await self._session.execute(ids_stmt)
            ids = list(result.scalars())
            if not ids:
                return 0
            await self._session.execute(delete(DocumentModel).where(DocumentModel.id.in_(ids)))
        return len(ids)

    def _to_entity(self, model: DocumentModel) -> Document:
        """Convert ORM model to domain entity."""
        return Document(
            id=model.id,
            collection=model.collection,
            data=dict(model.data or {}),
        )

    def _to_model(self, entity: Document) -> DocumentModel:
        """Convert domain entity to ORM model."""
        search_name = entity.data.get(SEARCH_NAME_KEY)
        return DocumentModel(
            id=entity.id,
            collection=entity.collection,
            data=entity.data,
            search_name=search_name if isinstance(search_name, str) else None,
        )
