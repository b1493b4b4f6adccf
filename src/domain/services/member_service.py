"""Member service layer for the read-only member directory."""

from collections.abc import Callable
from typing import Any

import structlog

from core.exceptions import ServiceUnavailableError
from domain.entities.member import MemberPage, MemberQuery
from domain.entities.query import DocumentQuery
from domain.repositories.document_repository import IDocumentRepository
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.member_mapping import assemble_page
from domain.services.query_builder import build_member_query


class MemberService:
    """Service layer for listing members.

    The logger is injected so callers (and tests) control where records go;
    it defaults to a structlog logger bound to this module.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        collection: str = "members",
        logger: Any | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._collection = collection
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    async def list_members(self, params: MemberQuery) -> MemberPage:
        """Get one page of members plus the total number of matches.

        The total comes from a separate count over the filters only, so it
        is not taken from the same snapshot as the page.

        Args:
            params: Validated listing parameters.

        Returns:
            The requested page with pagination data.

        Raises:
            ServiceUnavailableError: The document store failed.
        """
        query = build_member_query(self._collection, params)
        log = self._logger.bind(collection=self._collection)
        log.info(
            "members_query_built",
            filters=[f"{f.field} {f.op.value}" for f in query.filters],
            sort_field=query.order_by.field if query.order_by else None,
            sort_order=params.sort_order.value,
            limit=params.limit,
            offset=params.offset,
        )

        try:
            async with self._uow_factory() as uow:
                total = await self._count(uow.documents, query)
                documents = await uow.documents.find(query)
        except ServiceUnavailableError as exc:
            log.error("members_query_failed", reason=exc.reason)
            raise

        log.info("members_listed", total=total, returned=len(documents))
        return assemble_page(documents, total=total, limit=params.limit, offset=params.offset)

    async def _count(self, repo: IDocumentRepository, query: DocumentQuery) -> int:
        """Count matches, falling back to fetching the unpaginated result."""
        filter_query = query.filters_only()
        try:
            return await repo.count(filter_query)
        except NotImplementedError:
            self._logger.warning("aggregate_count_unavailable", collection=query.collection)
            return len(await repo.find(filter_query))
