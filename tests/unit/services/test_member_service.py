"""Unit tests for MemberService."""

from unittest.mock import MagicMock

import pytest

from core.exceptions import ServiceUnavailableError
from domain.entities.document import Document
from domain.entities.member import MemberQuery
from domain.services.member_service import MemberService
from tests.unit.conftest import FakeUnitOfWork


def _documents(count: int) -> list[Document]:
    return [
        Document(collection="members", data={"FirstName": f"User{i}"}, id=f"id-{i}")
        for i in range(count)
    ]


@pytest.fixture
def service(uow: FakeUnitOfWork, fake_logger: MagicMock) -> MemberService:
    return MemberService(lambda: uow, collection="members", logger=fake_logger)


class TestListMembers:
    @pytest.mark.asyncio
    async def test_returns_page_with_total(
        self, service: MemberService, uow: FakeUnitOfWork
    ) -> None:
        uow.documents.count.return_value = 12
        uow.documents.find.return_value = _documents(10)

        page = await service.list_members(MemberQuery())

        assert page.total == 12
        assert page.limit == 10
        assert page.offset == 0
        assert len(page.members) == 10
        assert page.members[0].first_name == "User0"
        assert page.has_more is True

    @pytest.mark.asyncio
    async def test_counts_with_filters_only(
        self, service: MemberService, uow: FakeUnitOfWork
    ) -> None:
        uow.documents.count.return_value = 0
        uow.documents.find.return_value = []

        await service.list_members(MemberQuery(active=True, limit=5, offset=20))

        count_query = uow.documents.count.await_args.args[0]
        find_query = uow.documents.find.await_args.args[0]
        assert count_query.order_by is None
        assert count_query.limit is None
        assert count_query.filters == find_query.filters
        assert find_query.limit == 5
        assert find_query.offset == 20

    @pytest.mark.asyncio
    async def test_uses_configured_collection(self, uow: FakeUnitOfWork) -> None:
        uow.documents.count.return_value = 0
        uow.documents.find.return_value = []
        service = MemberService(lambda: uow, collection="members_staging")

        await service.list_members(MemberQuery())

        assert uow.documents.find.await_args.args[0].collection == "members_staging"

    @pytest.mark.asyncio
    async def test_falls_back_when_count_is_unsupported(
        self, service: MemberService, uow: FakeUnitOfWork, fake_logger: MagicMock
    ) -> None:
        uow.documents.count.side_effect = NotImplementedError
        uow.documents.find.side_effect = [_documents(7), _documents(3)]

        page = await service.list_members(MemberQuery(limit=3))

        assert page.total == 7
        assert len(page.members) == 3
        fallback_query = uow.documents.find.await_args_list[0].args[0]
        assert fallback_query.limit is None
        fake_logger.warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(
        self, service: MemberService, uow: FakeUnitOfWork, fake_logger: MagicMock
    ) -> None:
        uow.documents.count.return_value = 4
        uow.documents.find.side_effect = ServiceUnavailableError("connection refused")

        with pytest.raises(ServiceUnavailableError):
            await service.list_members(MemberQuery())

        fake_logger.error.assert_called_once_with(
            "members_query_failed", reason="connection refused"
        )

    @pytest.mark.asyncio
    async def test_logs_built_query_and_result(
        self, service: MemberService, uow: FakeUnitOfWork, fake_logger: MagicMock
    ) -> None:
        uow.documents.count.return_value = 1
        uow.documents.find.return_value = _documents(1)

        await service.list_members(MemberQuery(search="jo"))

        events = [c.args[0] for c in fake_logger.info.call_args_list]
        assert events == ["members_query_built", "members_listed"]
        fake_logger.bind.assert_called_once_with(collection="members")

    @pytest.mark.asyncio
    async def test_empty_result(self, service: MemberService, uow: FakeUnitOfWork) -> None:
        uow.documents.count.return_value = 0
        uow.documents.find.return_value = []

        page = await service.list_members(MemberQuery())

        assert page.members == []
        assert page.total == 0
        assert page.has_more is False
