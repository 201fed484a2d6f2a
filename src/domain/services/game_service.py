"""Game catalog service layer with business logic."""

from typing import Callable, List, Optional

import structlog

from core.config import settings
from core.exceptions import (
    GameNotFoundError,
    InsufficientRoleError,
    NotAuthenticatedError,
    ValidationError,
)
from domain.entities.game import Game
from domain.entities.profile import Profile, UserRole
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class GameService:
    """Service layer for browsing the catalog and admin catalog edits."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        feed_limit: int = settings.feed_limit,
    ) -> None:
        self._uow_factory = uow_factory
        self._feed_limit = feed_limit

    async def list_recent(self, limit: Optional[int] = None) -> List[Game]:
        """Most recently added games, newest first."""
        async with self._uow_factory() as uow:
            return await uow.games.get_recent(limit or self._feed_limit)

    async def search(self, query: str, limit: Optional[int] = None) -> List[Game]:
        """Case-insensitive name search. A blank query matches nothing."""
        query = query.strip()
        if not query:
            return []
        async with self._uow_factory() as uow:
            return await uow.games.search_by_name(query, limit or self._feed_limit)

    async def list_all(self) -> List[Game]:
        """All games ordered by name, for the admin catalog."""
        async with self._uow_factory() as uow:
            return await uow.games.get_all()

    async def get(self, game_id: int) -> Game:
        async with self._uow_factory() as uow:
            game = await uow.games.get(game_id)
            if not game:
                raise GameNotFoundError(game_id)
            return game

    async def create(
        self,
        actor: Optional[Profile],
        name: str,
        min_players: int,
        max_players: int,
        playing_time: int,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Game:
        """Add a game to the catalog. Requires the admin role."""
        admin = self._require_admin(actor)
        self._validate_players(min_players, max_players)

        game = Game(
            name=name.strip(),
            min_players=min_players,
            max_players=max_players,
            playing_time=playing_time,
            description=(description or "").strip() or None,
            thumbnail_url=(thumbnail_url or "").strip() or None,
        )
        async with self._uow_factory() as uow:
            created = await uow.games.create(game)
            await uow.commit()

        logger.info("game_created", game_id=created.id, actor_id=str(admin.id))
        return created

    async def update(
        self,
        actor: Optional[Profile],
        game_id: int,
        name: Optional[str] = None,
        min_players: Optional[int] = None,
        max_players: Optional[int] = None,
        playing_time: Optional[int] = None,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> Game:
        """Edit a catalog entry. Requires the admin role."""
        self._require_admin(actor)

        async with self._uow_factory() as uow:
            game = await uow.games.get(game_id)
            if not game:
                raise GameNotFoundError(game_id)

            if name is not None:
                game.name = name.strip()
            if min_players is not None:
                game.min_players = min_players
            if max_players is not None:
                game.max_players = max_players
            if playing_time is not None:
                game.playing_time = playing_time
            if description is not None:
                game.description = description.strip() or None
            if thumbnail_url is not None:
                game.thumbnail_url = thumbnail_url.strip() or None

            self._validate_players(game.min_players, game.max_players)

            updated = await uow.games.update(game)
            await uow.commit()
            return updated

    async def delete(self, actor: Optional[Profile], game_id: int) -> None:
        """Delete a game with all its evaluations and list memberships.

        Everything is removed in one transaction so no row is left pointing
        at the deleted game.
        """
        admin = self._require_admin(actor)

        async with self._uow_factory() as uow:
            game = await uow.games.get(game_id)
            if not game:
                raise GameNotFoundError(game_id)

            evaluations = await uow.evaluations.delete_for_game(game_id)
            memberships = await uow.list_memberships.delete_for_game(game_id)
            await uow.games.delete(game_id)
            await uow.commit()

        logger.info(
            "game_deleted",
            game_id=game_id,
            actor_id=str(admin.id),
            evaluations_deleted=evaluations,
            memberships_deleted=memberships,
        )

    # --- Internal helpers ---

    @staticmethod
    def _require_admin(actor: Optional[Profile]) -> Profile:
        if actor is None:
            raise NotAuthenticatedError()
        if actor.role != UserRole.ADMIN:
            raise InsufficientRoleError(UserRole.ADMIN.value)
        return actor

    @staticmethod
    def _validate_players(min_players: int, max_players: int) -> None:
        if min_players > max_players:
            raise ValidationError(
                "Máximo deve ser maior ou igual ao mínimo", field="max_players"
            )
