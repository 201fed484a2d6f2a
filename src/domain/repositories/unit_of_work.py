"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.evaluation_repository import IEvaluationRepository
from domain.repositories.game_repository import IGameRepository
from domain.repositories.list_membership_repository import IListMembershipRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    games: IGameRepository
    list_memberships: IListMembershipRepository
    evaluations: IEvaluationRepository

    async def ping(self) -> None:
        """Check the database is reachable."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
