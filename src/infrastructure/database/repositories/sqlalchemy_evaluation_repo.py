"""SQLAlchemy implementation of Evaluation repository."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.evaluation import Evaluation, EvaluationWithAuthor
from domain.repositories.errors import UniqueViolation
from infrastructure.database.integrity import is_unique_violation
from infrastructure.database.models import EvaluationModel, ProfileModel


class SQLAlchemyEvaluationRepository:
    """SQLAlchemy implementation of IEvaluationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Evaluation | None:
        """Get an evaluation by ID."""
        stmt = select(EvaluationModel).where(EvaluationModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_user_and_game(self, user_id: UUID, game_id: int) -> Evaluation | None:
        """Get the single evaluation a user left on a game."""
        stmt = select(EvaluationModel).where(
            EvaluationModel.user_id == user_id,
            EvaluationModel.game_id == game_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_for_game(self, game_id: int) -> list[EvaluationWithAuthor]:
        """Get all evaluations of a game with author fields, newest first."""
        stmt = (
            select(
                EvaluationModel,
                ProfileModel.username,
                ProfileModel.first_name,
                ProfileModel.last_name,
            )
            .join(ProfileModel, ProfileModel.id == EvaluationModel.user_id)
            .where(EvaluationModel.game_id == game_id)
            .order_by(EvaluationModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [
            EvaluationWithAuthor(
                evaluation=self._to_entity(model),
                username=username,
                first_name=first_name,
                last_name=last_name,
            )
            for model, username, first_name, last_name in result
        ]

    async def create(self, evaluation: Evaluation) -> Evaluation:
        """Insert an evaluation. Raises UniqueViolation on a uniqueness violation."""
        model = self._to_model(evaluation)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UniqueViolation("uq_evaluation_user_game") from e
            raise
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, evaluation: Evaluation) -> Evaluation:
        """Update rating and comment."""
        stmt = select(EvaluationModel).where(EvaluationModel.id == evaluation.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Evaluation {evaluation.id} not found")

        model.rating = evaluation.rating
        model.comment = evaluation.comment
        model.updated_at = evaluation.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an evaluation."""
        stmt = delete(EvaluationModel).where(EvaluationModel.id == id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return (result.rowcount or 0) > 0

    async def delete_for_game(self, game_id: int) -> int:
        """Delete every evaluation of a game and return the count."""
        stmt = delete(EvaluationModel).where(EvaluationModel.game_id == game_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0

    def _to_entity(self, model: EvaluationModel) -> Evaluation:
        """Convert ORM model to domain entity."""
        return Evaluation(
            id=model.id,
            user_id=model.user_id,
            game_id=model.game_id,
            rating=model.rating,
            comment=model.comment,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Evaluation) -> EvaluationModel:
        """Convert domain entity to ORM model."""
        return EvaluationModel(
            id=entity.id,
            user_id=entity.user_id,
            game_id=entity.game_id,
            rating=entity.rating,
            comment=entity.comment,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
