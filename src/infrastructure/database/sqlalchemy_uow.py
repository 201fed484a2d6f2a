"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_evaluation_repo import SQLAlchemyEvaluationRepository
from infrastructure.database.repositories.sqlalchemy_game_repo import SQLAlchemyGameRepository
from infrastructure.database.repositories.sqlalchemy_list_membership_repo import SQLAlchemyListMembershipRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import SQLAlchemyProfileRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        """Get profile repository."""
        return SQLAlchemyProfileRepository(self._require_session())

    @property
    def games(self) -> SQLAlchemyGameRepository:
        """Get game repository."""
        return SQLAlchemyGameRepository(self._require_session())

    @property
    def list_memberships(self) -> SQLAlchemyListMembershipRepository:
        """Get user game list repository."""
        return SQLAlchemyListMembershipRepository(self._require_session())

    @property
    def evaluations(self) -> SQLAlchemyEvaluationRepository:
        """Get evaluation repository."""
        return SQLAlchemyEvaluationRepository(self._require_session())

    async def ping(self) -> None:
        """Round-trip a trivial query."""
        await self._require_session().execute(text("SELECT 1"))

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
