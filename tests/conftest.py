"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

# Test settings must be in place before the application modules load
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["APP_ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities.document import Document
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_member_data(**override: Any) -> dict[str, Any]:
    """Stored payload of a fully populated member document."""
    data: dict[str, Any] = {
        "FirstName": "John",
        "LastName": "Doe",
        "Email": "john@example.com",
        "JoinDate": "2024-01-01T00:00:00.000Z",
        "Active": True,
        "searchName": "john doe",
        "Bio": "",
        "Headline": "",
        "Location": "",
        "Tags": [],
        "LastActive": None,
        "InvitationDate": None,
        "EmailMarketing": False,
        "Member": False,
        "ProfileURL": "",
        "WebsiteURL": "",
        "TwitterURL": "",
        "FacebookURL": "",
        "LinkedInURL": "",
        "InstagramURL": "",
        "Posts": 0,
        "Comments": 0,
        "LikesReceived": 0,
        "AvatarURL": "",
    }
    data.update(override)
    return data


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with the schema in place."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def seed_documents(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> Callable[..., Awaitable[list[Document]]]:
    """Insert documents into a collection and return them."""

    async def seed(*payloads: dict[str, Any], collection: str = "members") -> list[Document]:
        documents = [Document(collection=collection, data=payload) for payload in payloads]
        async with uow_factory() as uow:
            await uow.documents.add_many(documents)
            await uow.commit()
        return documents

    return seed


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def members_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client whose member service reads the test database.

    This client:
    - Uses an in-memory SQLite database
    - Overrides the member service to use a test UoW factory
    """
    from api.v1.dependencies import get_member_service
    from domain.services.member_service import MemberService
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_member_service] = lambda: MemberService(
        uow_factory, collection="members"
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
