"""SQLAlchemy implementation of ListMembership repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.game import Game
from domain.entities.list_membership import ListKind, ListMembership
from domain.repositories.errors import UniqueViolation
from infrastructure.database.integrity import is_unique_violation
from infrastructure.database.models import GameModel, UserGameListModel
from infrastructure.database.repositories.sqlalchemy_game_repo import game_to_entity


class SQLAlchemyListMembershipRepository:
    """SQLAlchemy implementation of IListMembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, user_id: UUID, game_id: int, kind: ListKind) -> bool:
        """Check whether the (user, game, kind) row exists."""
        stmt = select(func.count()).select_from(UserGameListModel).where(
            UserGameListModel.user_id == user_id,
            UserGameListModel.game_id == game_id,
            UserGameListModel.list_type == kind.value,
        )
        result = await self._session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def get_kinds(self, user_id: UUID, game_id: int) -> set[ListKind]:
        """Get the kinds of list a user has placed a game in."""
        stmt = select(UserGameListModel.list_type).where(
            UserGameListModel.user_id == user_id,
            UserGameListModel.game_id == game_id,
        )
        result = await self._session.execute(stmt)
        return {ListKind(list_type) for list_type in result.scalars()}

    async def get_for_user(
        self, user_id: UUID, kind: ListKind
    ) -> list[tuple[ListMembership, Game]]:
        """Get one of a user's lists, newest first, joined with its games."""
        stmt = (
            select(UserGameListModel, GameModel)
            .join(GameModel, GameModel.id == UserGameListModel.game_id)
            .where(
                UserGameListModel.user_id == user_id,
                UserGameListModel.list_type == kind.value,
            )
            .order_by(UserGameListModel.added_at.desc())
        )
        result = await self._session.execute(stmt)
        return [(self._to_entity(row), game_to_entity(game)) for row, game in result]

    async def add(self, membership: ListMembership) -> ListMembership:
        """Insert a row. Raises UniqueViolation on a uniqueness violation."""
        model = self._to_model(membership)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UniqueViolation("uq_user_game_list") from e
            raise
        return self._to_entity(model)

    async def remove(self, user_id: UUID, game_id: int, kind: ListKind) -> bool:
        """Delete a row; False when it did not exist."""
        stmt = delete(UserGameListModel).where(
            UserGameListModel.user_id == user_id,
            UserGameListModel.game_id == game_id,
            UserGameListModel.list_type == kind.value,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return (result.rowcount or 0) > 0

    async def delete_for_game(self, game_id: int) -> int:
        """Delete every membership row of a game and return the count."""
        stmt = delete(UserGameListModel).where(UserGameListModel.game_id == game_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0

    def _to_entity(self, model: UserGameListModel) -> ListMembership:
        """Convert ORM model to domain entity."""
        return ListMembership(
            user_id=model.user_id,
            game_id=model.game_id,
            kind=ListKind(model.list_type),
            added_at=model.added_at,
        )

    def _to_model(self, entity: ListMembership) -> UserGameListModel:
        """Convert domain entity to ORM model."""
        return UserGameListModel(
            user_id=entity.user_id,
            game_id=entity.game_id,
            list_type=entity.kind.value,
            added_at=entity.added_at,
        )
