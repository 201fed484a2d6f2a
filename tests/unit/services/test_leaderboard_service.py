"""Unit tests for LeaderboardService."""

import pytest

from domain.entities.game import Game
from domain.services.leaderboard_service import LeaderboardService
from tests.unit.conftest import FakeUnitOfWork


def _game(id: int) -> Game:
    return Game(id=id, name=f"Game {id}", min_players=1, max_players=4, playing_time=30)


@pytest.fixture
def service(uow: FakeUnitOfWork) -> LeaderboardService:
    return LeaderboardService(lambda: uow)


class TestTopGames:
    @pytest.mark.asyncio
    async def test_orders_by_average_descending(
        self, service: LeaderboardService, uow: FakeUnitOfWork
    ):
        uow.games.get_ratings_by_game.return_value = [
            (_game(1), [3, 4]),
            (_game(2), [5, 5, 4]),
            (_game(3), [2]),
        ]

        entries = await service.top_games()

        assert [e.game.id for e in entries] == [2, 1, 3]
        assert [e.rank for e in entries] == [1, 2, 3]
        assert entries[0].total_evaluations == 3
        assert entries[1].average_rating == 3.5

    @pytest.mark.asyncio
    async def test_ties_keep_game_id_order(
        self, service: LeaderboardService, uow: FakeUnitOfWork
    ):
        uow.games.get_ratings_by_game.return_value = [
            (_game(9), [4]),
            (_game(2), [4]),
        ]

        entries = await service.top_games()

        assert [e.game.id for e in entries] == [2, 9]

    @pytest.mark.asyncio
    async def test_limit(self, service: LeaderboardService, uow: FakeUnitOfWork):
        uow.games.get_ratings_by_game.return_value = [(_game(i), [i % 5 + 1]) for i in range(1, 8)]

        entries = await service.top_games(limit=3)

        assert len(entries) == 3
        assert entries[-1].rank == 3

    @pytest.mark.asyncio
    async def test_unrated_games_are_left_out(
        self, service: LeaderboardService, uow: FakeUnitOfWork
    ):
        uow.games.get_ratings_by_game.return_value = [(_game(1), [])]

        assert await service.top_games() == []
