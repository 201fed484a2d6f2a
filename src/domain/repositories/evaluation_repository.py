"""Evaluation repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.evaluation import Evaluation, EvaluationWithAuthor


class IEvaluationRepository(Protocol):
    """Repository interface for Evaluation entities."""

    async def get(self, id: UUID) -> Evaluation | None:
        """Get an evaluation by ID."""
        ...

    async def get_for_user_and_game(self, user_id: UUID, game_id: int) -> Evaluation | None:
        """Get the single evaluation a user left on a game."""
        ...

    async def get_for_game(self, game_id: int) -> list[EvaluationWithAuthor]:
        """Get all evaluations of a game with author fields, newest first."""
        ...

    async def create(self, evaluation: Evaluation) -> Evaluation:
        """Insert an evaluation. Raises UniqueViolation on a uniqueness violation."""
        ...

    async def update(self, evaluation: Evaluation) -> Evaluation:
        """Update rating and comment."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an evaluation and return success status."""
        ...

    async def delete_for_game(self, game_id: int) -> int:
        """Delete every evaluation of a game and return the count."""
        ...
