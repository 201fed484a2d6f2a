"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import Profile, UserRole


class FakeUnitOfWork:
    """Fake Unit of Work with the 4 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.games = AsyncMock()
        self.list_memberships = AsyncMock()
        self.evaluations = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def ping(self) -> None:
        pass

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
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def profile(user_id: UUID) -> Profile:
    """A regular user's profile."""
    return Profile(id=user_id, username="ana123", first_name="Ana", last_name="Souza")


@pytest.fixture
def admin() -> Profile:
    """An admin's profile."""
    return Profile(id=uuid4(), username="admin1", first_name="Admin", role=UserRole.ADMIN)
