"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Profile, UserRole


class ProfileUpdate(BaseModel):
    """Schema for editing the user's own profile."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    username: str = Field(..., min_length=3, max_length=50)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "ana417",
                "first_name": "Ana",
                "last_name": "Souza",
                "role": "user",
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole
    created_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile)


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse
