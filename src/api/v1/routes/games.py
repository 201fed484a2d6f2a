"""Game catalog API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies.auth import OptionalProfile
from api.v1.dependencies import get_game_service
from api.v1.schemas.game import (
    GameCreate,
    GameDetailResponse,
    GameListResponse,
    GameResponse,
    GameUpdate,
)
from domain.services.game_service import GameService

router = APIRouter(prefix="/games", tags=["games"])


@router.get(
    "",
    response_model=GameListResponse,
    summary="Feed or search",
)
async def list_games(
    q: Optional[str] = Query(None, description="Search by name"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: GameService = Depends(get_game_service),
) -> GameListResponse:
    """Newest games, or the games whose name contains ``q``."""
    if q is not None:
        games = await service.search(q, limit)
    else:
        games = await service.list_recent(limit)
    return GameListResponse(data=[GameResponse.model_validate(g) for g in games])


@router.get(
    "/catalog",
    response_model=GameListResponse,
    summary="Full catalog by name",
)
async def list_catalog(service: GameService = Depends(get_game_service)) -> GameListResponse:
    games = await service.list_all()
    return GameListResponse(data=[GameResponse.model_validate(g) for g in games])


@router.get(
    "/{game_id}",
    response_model=GameDetailResponse,
    summary="Get a game",
    responses={404: {"description": "Game not found"}},
)
async def get_game(
    game_id: int,
    service: GameService = Depends(get_game_service),
) -> GameDetailResponse:
    game = await service.get(game_id)
    return GameDetailResponse(data=GameResponse.model_validate(game))


@router.post(
    "",
    response_model=GameDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a game (admin)",
    responses={403: {"description": "Admin role required"}},
)
async def create_game(
    body: GameCreate,
    profile: OptionalProfile,
    service: GameService = Depends(get_game_service),
) -> GameDetailResponse:
    game = await service.create(
        actor=profile,
        name=body.name,
        min_players=body.min_players,
        max_players=body.max_players,
        playing_time=body.playing_time,
        description=body.description,
        thumbnail_url=body.thumbnail_url,
    )
    return GameDetailResponse(data=GameResponse.model_validate(game))


@router.patch(
    "/{game_id}",
    response_model=GameDetailResponse,
    summary="Edit a game (admin)",
    responses={403: {"description": "Admin role required"}, 404: {"description": "Game not found"}},
)
async def update_game(
    game_id: int,
    body: GameUpdate,
    profile: OptionalProfile,
    service: GameService = Depends(get_game_service),
) -> GameDetailResponse:
    game = await service.update(
        actor=profile,
        game_id=game_id,
        **body.model_dump(exclude_unset=True),
    )
    return GameDetailResponse(data=GameResponse.model_validate(game))


@router.delete(
    "/{game_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a game (admin)",
    responses={403: {"description": "Admin role required"}, 404: {"description": "Game not found"}},
)
async def delete_game(
    game_id: int,
    profile: OptionalProfile,
    service: GameService = Depends(get_game_service),
) -> Response:
    """Delete a game together with its evaluations and list entries."""
    await service.delete(actor=profile, game_id=game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
