"""Profile API routes."""

from fastapi import APIRouter, Depends

from api.dependencies.auth import CurrentProfile
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse, ProfileUpdate
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileDetailResponse, summary="Get own profile")
async def get_profile(profile: CurrentProfile) -> ProfileDetailResponse:
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.patch(
    "",
    response_model=ProfileDetailResponse,
    summary="Edit own profile",
    responses={409: {"description": "Username already taken"}},
)
async def update_profile(
    body: ProfileUpdate,
    profile: CurrentProfile,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Change name and username. The session's profile is reloaded afterwards."""
    updated = await service.update(
        user_id=profile.id,
        first_name=body.first_name,
        last_name=body.last_name,
        username=body.username,
    )
    return ProfileDetailResponse(data=ProfileResponse.from_entity(updated or profile))
