"""Leaderboard service: community average ratings."""

from typing import Callable, List, Optional

from domain.entities.game import LeaderboardEntry
from domain.repositories.unit_of_work import IUnitOfWork


class LeaderboardService:
    """Ranks rated games by their average rating."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def top_games(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """Games with at least one evaluation, best average first.

        Ties keep ascending game id order.
        """
        async with self._uow_factory() as uow:
            rated = await uow.games.get_ratings_by_game()

        entries = [
            LeaderboardEntry(
                game=game,
                average_rating=sum(ratings) / len(ratings),
                total_evaluations=len(ratings),
            )
            for game, ratings in sorted(rated, key=lambda item: item[0].id or 0)
            if ratings
        ]
        entries.sort(key=lambda entry: entry.average_rating, reverse=True)

        for position, entry in enumerate(entries, start=1):
            entry.rank = position

        return entries[:limit] if limit else entries
