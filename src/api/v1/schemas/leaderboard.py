"""Pydantic schemas for Leaderboard API."""

from pydantic import BaseModel

from api.v1.schemas.game import GameResponse


class LeaderboardEntryResponse(BaseModel):
    """A ranked game."""

    rank: int
    average_rating: float
    total_evaluations: int
    game: GameResponse


class LeaderboardResponse(BaseModel):
    data: list[LeaderboardEntryResponse]
