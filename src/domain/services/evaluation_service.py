"""Evaluation service layer with business logic."""

from typing import Callable, List, Optional
from uuid import UUID

import structlog

from core.exceptions import (
    EvaluationNotFoundError,
    GameNotFoundError,
    NotAuthenticatedError,
    ValidationError,
)
from domain.entities.evaluation import MAX_RATING, MIN_RATING, Evaluation, EvaluationWithAuthor
from domain.repositories.errors import UniqueViolation
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class EvaluationService:
    """Service layer for ratings and comments.

    A user has at most one evaluation per game; submitting again revises it.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def submit(
        self,
        user_id: Optional[UUID],
        game_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> Evaluation:
        """Create or update the user's evaluation of a game."""
        if user_id is None:
            raise NotAuthenticatedError()
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}", field="rating"
            )
        comment = (comment or "").strip() or None

        async with self._uow_factory() as uow:
            if not await uow.games.get(game_id):
                raise GameNotFoundError(game_id)

            existing = await uow.evaluations.get_for_user_and_game(user_id, game_id)
            if existing:
                existing.revise(rating, comment)
                saved = await uow.evaluations.update(existing)
                await uow.commit()
                return saved

            try:
                saved = await uow.evaluations.create(
                    Evaluation(user_id=user_id, game_id=game_id, rating=rating, comment=comment)
                )
                await uow.commit()
                return saved
            except UniqueViolation:
                # Another session inserted first; revise that row instead
                await uow.rollback()
                logger.info("evaluation_insert_conflict", user_id=str(user_id), game_id=game_id)

        async with self._uow_factory() as uow:
            existing = await uow.evaluations.get_for_user_and_game(user_id, game_id)
            if not existing:
                raise EvaluationNotFoundError(f"{user_id}:{game_id}")
            existing.revise(rating, comment)
            saved = await uow.evaluations.update(existing)
            await uow.commit()
            return saved

    async def get_for_user(self, user_id: Optional[UUID], game_id: int) -> Optional[Evaluation]:
        if user_id is None:
            return None
        async with self._uow_factory() as uow:
            return await uow.evaluations.get_for_user_and_game(user_id, game_id)

    async def list_for_game(self, game_id: int) -> List[EvaluationWithAuthor]:
        """All evaluations of a game, newest first."""
        async with self._uow_factory() as uow:
            return await uow.evaluations.get_for_game(game_id)

    async def delete(self, user_id: Optional[UUID], evaluation_id: UUID) -> None:
        """Delete an evaluation. Only its author may delete it."""
        if user_id is None:
            raise NotAuthenticatedError()

        async with self._uow_factory() as uow:
            evaluation = await uow.evaluations.get(evaluation_id)
            if not evaluation or evaluation.user_id != user_id:
                raise EvaluationNotFoundError(str(evaluation_id))

            await uow.evaluations.delete(evaluation_id)
            await uow.commit()
