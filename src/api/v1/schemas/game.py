"""Pydantic schemas for Game API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GameCreate(BaseModel):
    """Schema for adding a Game to the catalog."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    min_players: int = Field(..., gt=0)
    max_players: int = Field(..., gt=0)
    playing_time: int = Field(..., gt=0, description="Minutes")
    thumbnail_url: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def max_not_below_min(self) -> "GameCreate":
        if self.max_players < self.min_players:
            raise ValueError("Máximo deve ser maior ou igual ao mínimo")
        return self


class GameUpdate(BaseModel):
    """Schema for editing a Game (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    min_players: Optional[int] = Field(None, gt=0)
    max_players: Optional[int] = Field(None, gt=0)
    playing_time: Optional[int] = Field(None, gt=0)
    thumbnail_url: Optional[str] = Field(None, max_length=500)


class GameResponse(BaseModel):
    """Schema for Game response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 42,
                "name": "Azul",
                "description": "Tile drafting in the Portuguese palace",
                "min_players": 2,
                "max_players": 4,
                "playing_time": 45,
                "thumbnail_url": None,
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: int
    name: str
    description: Optional[str] = None
    min_players: int
    max_players: int
    playing_time: int
    thumbnail_url: Optional[str] = None
    created_at: datetime


class GameListResponse(BaseModel):
    """Schema for list of Games."""

    data: list[GameResponse]


class GameDetailResponse(BaseModel):
    """Schema for single Game."""

    data: GameResponse
