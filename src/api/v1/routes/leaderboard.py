"""Leaderboard API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.v1.dependencies import get_leaderboard_service
from api.v1.schemas.game import GameResponse
from api.v1.schemas.leaderboard import LeaderboardEntryResponse, LeaderboardResponse
from domain.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse, summary="Top rated games")
async def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    """Rated games ordered by average rating."""
    entries = await service.top_games(limit)
    return LeaderboardResponse(
        data=[
            LeaderboardEntryResponse(
                rank=entry.rank,
                average_rating=round(entry.average_rating, 2),
                total_evaluations=entry.total_evaluations,
                game=GameResponse.model_validate(entry.game),
            )
            for entry in entries
        ]
    )
