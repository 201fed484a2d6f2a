"""Evaluation API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from api.dependencies.auth import CurrentProfile, OptionalProfile
from api.v1.dependencies import get_evaluation_service
from api.v1.schemas.evaluation import (
    EvaluationDetailResponse,
    EvaluationResponse,
    EvaluationSubmit,
    GameEvaluationListResponse,
    GameEvaluationResponse,
)
from domain.services.evaluation_service import EvaluationService

game_evaluations_router = APIRouter(prefix="/games/{game_id}", tags=["evaluations"])
router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@game_evaluations_router.get(
    "/evaluations",
    response_model=GameEvaluationListResponse,
    summary="List a game's evaluations",
)
async def list_evaluations(
    game_id: int,
    service: EvaluationService = Depends(get_evaluation_service),
) -> GameEvaluationListResponse:
    """All ratings and comments for a game, newest first."""
    items = await service.list_for_game(game_id)
    return GameEvaluationListResponse(
        data=[GameEvaluationResponse.from_entity(item) for item in items]
    )


@game_evaluations_router.get(
    "/evaluation",
    response_model=EvaluationDetailResponse,
    summary="Get own evaluation of a game",
)
async def get_own_evaluation(
    game_id: int,
    profile: OptionalProfile,
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationDetailResponse:
    evaluation = await service.get_for_user(profile.id if profile else None, game_id)
    return EvaluationDetailResponse(
        data=EvaluationResponse.model_validate(evaluation) if evaluation else None
    )


@game_evaluations_router.put(
    "/evaluation",
    response_model=EvaluationDetailResponse,
    summary="Rate a game",
    responses={404: {"description": "Game not found"}},
)
async def submit_evaluation(
    game_id: int,
    body: EvaluationSubmit,
    profile: CurrentProfile,
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationDetailResponse:
    """Create or replace the user's rating and comment for a game."""
    evaluation = await service.submit(profile.id, game_id, body.rating, body.comment)
    return EvaluationDetailResponse(data=EvaluationResponse.model_validate(evaluation))


@router.delete(
    "/{evaluation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete own evaluation",
    responses={404: {"description": "Evaluation not found"}},
)
async def delete_evaluation(
    evaluation_id: UUID,
    profile: CurrentProfile,
    service: EvaluationService = Depends(get_evaluation_service),
) -> Response:
    await service.delete(profile.id, evaluation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
