"""Pydantic schemas for Auth API."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from api.v1.schemas.profile import ProfileResponse
from domain.entities.session import SessionState, SessionStatus


class LoginRequest(BaseModel):
    """Schema for logging in with email and password."""

    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)


class SignupRequest(BaseModel):
    """Schema for registering a new account."""

    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field("", max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Senhas não conferem")
        return self


class SessionResponse(BaseModel):
    """Schema for the current session state."""

    status: SessionStatus
    user_id: Optional[UUID] = None
    email: Optional[str] = None
    is_admin: bool = False
    profile: Optional[ProfileResponse] = None
    profile_stale: bool = False
    error: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionResponse":
        return cls(
            status=state.status,
            user_id=state.user_id,
            email=state.session.email if state.session else None,
            is_admin=state.is_admin,
            profile=ProfileResponse.from_entity(state.profile) if state.profile else None,
            profile_stale=state.profile_stale,
            error=state.error,
        )


class SessionDetailResponse(BaseModel):
    """Schema for single session state."""

    data: SessionResponse


class SignupResponse(BaseModel):
    """Schema for a completed signup."""

    user_id: UUID
    username: str
    requires_confirmation: bool
    session: SessionResponse


class SignupDetailResponse(BaseModel):
    """Schema for single signup result."""

    data: SignupResponse
