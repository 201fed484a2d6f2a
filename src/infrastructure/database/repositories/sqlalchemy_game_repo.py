"""SQLAlchemy implementation of Game repository."""

from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.game import Game
from infrastructure.database.models import EvaluationModel, GameModel


class SQLAlchemyGameRepository:
    """SQLAlchemy implementation of IGameRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: int) -> Game | None:
        """Get a game by ID."""
        stmt = select(GameModel).where(GameModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_recent(self, limit: int) -> list[Game]:
        """Get the most recently added games (highest IDs first)."""
        stmt = select(GameModel).order_by(GameModel.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def search_by_name(self, query: str, limit: int) -> list[Game]:
        """Case-insensitive substring search on the game name."""
        pattern = f"%{query.lower()}%"
        stmt = (
            select(GameModel)
            .where(func.lower(GameModel.name).like(pattern))
            .order_by(GameModel.name)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_all(self) -> list[Game]:
        """Get all games ordered by name."""
        stmt = select(GameModel).order_by(GameModel.name)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_ratings_by_game(self) -> list[tuple[Game, list[int]]]:
        """Get every game with at least one evaluation, ordered by ID, with its ratings."""
        stmt = (
            select(GameModel, EvaluationModel.rating)
            .join(EvaluationModel, EvaluationModel.game_id == GameModel.id)
            .order_by(GameModel.id)
        )
        result = await self._session.execute(stmt)

        games: dict[int, GameModel] = {}
        ratings: dict[int, list[int]] = defaultdict(list)
        for game_model, rating in result:
            games[game_model.id] = game_model
            ratings[game_model.id].append(rating)

        return [(self._to_entity(games[game_id]), ratings[game_id]) for game_id in games]

    async def create(self, game: Game) -> Game:
        """Create a new game."""
        model = self._to_model(game)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, game: Game) -> Game:
        """Update an existing game."""
        stmt = select(GameModel).where(GameModel.id == game.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Game {game.id} not found")

        model.name = game.name
        model.description = game.description
        model.min_players = game.min_players
        model.max_players = game.max_players
        model.playing_time = game.playing_time
        model.thumbnail_url = game.thumbnail_url

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: int) -> bool:
        """Delete a game."""
        stmt = select(GameModel).where(GameModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: GameModel) -> Game:
        """Convert ORM model to domain entity."""
        return game_to_entity(model)

    def _to_model(self, entity: Game) -> GameModel:
        """Convert domain entity to ORM model."""
        return GameModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            min_players=entity.min_players,
            max_players=entity.max_players,
            playing_time=entity.playing_time,
            thumbnail_url=entity.thumbnail_url,
            created_at=entity.created_at,
        )


def game_to_entity(model: GameModel) -> Game:
    """Convert a game ORM model to its domain entity."""
    return Game(
        id=model.id,
        name=model.name,
        description=model.description,
        min_players=model.min_players,
        max_players=model.max_players,
        playing_time=model.playing_time,
        thumbnail_url=model.thumbnail_url,
        created_at=model.created_at,
    )
