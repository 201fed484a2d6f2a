"""Game repository protocol."""

from typing import Protocol

from domain.entities.game import Game


class IGameRepository(Protocol):
    """Repository interface for Game entities."""

    async def get(self, id: int) -> Game | None:
        """Get a game by ID."""
        ...

    async def get_recent(self, limit: int) -> list[Game]:
        """Get the most recently added games (highest IDs first)."""
        ...

    async def search_by_name(self, query: str, limit: int) -> list[Game]:
        """Case-insensitive substring search on the game name."""
        ...

    async def get_all(self) -> list[Game]:
        """Get all games ordered by name."""
        ...

    async def get_ratings_by_game(self) -> list[tuple[Game, list[int]]]:
        """Get every game with at least one evaluation, ordered by ID, with its ratings."""
        ...

    async def create(self, game: Game) -> Game:
        """Create a new game."""
        ...

    async def update(self, game: Game) -> Game:
        """Update an existing game."""
        ...

    async def delete(self, id: int) -> bool:
        """Delete a game and return success status."""
        ...
