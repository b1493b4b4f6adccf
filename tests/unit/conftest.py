"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


class FakeUnitOfWork:
    """Fake Unit of Work with a mocked document repository."""

    def __init__(self) -> None:
        self.documents = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def fake_logger() -> MagicMock:
    """A logger double whose ``bind`` returns itself."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger
