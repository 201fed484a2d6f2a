"""Pydantic schemas for Evaluation API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.evaluation import MAX_RATING, MIN_RATING, EvaluationWithAuthor


class EvaluationSubmit(BaseModel):
    """Schema for rating a game."""

    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(None, max_length=2000)


class EvaluationResponse(BaseModel):
    """Schema for Evaluation response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    game_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EvaluationAuthorResponse(BaseModel):
    """Public fields of an evaluation's author."""

    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class GameEvaluationResponse(EvaluationResponse):
    """Evaluation as listed on a game's page."""

    author: EvaluationAuthorResponse

    @classmethod
    def from_entity(cls, item: EvaluationWithAuthor) -> "GameEvaluationResponse":
        e = item.evaluation
        return cls(
            id=e.id,
            user_id=e.user_id,
            game_id=e.game_id,
            rating=e.rating,
            comment=e.comment,
            created_at=e.created_at,
            updated_at=e.updated_at,
            author=EvaluationAuthorResponse(
                username=item.username,
                first_name=item.first_name,
                last_name=item.last_name,
            ),
        )


class GameEvaluationListResponse(BaseModel):
    """Schema for a game's evaluations."""

    data: list[GameEvaluationResponse]


class EvaluationDetailResponse(BaseModel):
    """Schema for single Evaluation."""

    data: Optional[EvaluationResponse]
