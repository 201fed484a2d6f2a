"""Auth API routes."""

from fastapi import APIRouter, status

from api.dependencies.auth import Session
from api.v1.schemas.auth import (
    LoginRequest,
    SessionDetailResponse,
    SessionResponse,
    SignupDetailResponse,
    SignupRequest,
    SignupResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get(
    "/session",
    response_model=SessionDetailResponse,
    summary="Current session",
)
async def get_session(manager: Session) -> SessionDetailResponse:
    """Who is logged in, their profile and whether they are an admin."""
    return SessionDetailResponse(data=SessionResponse.from_state(manager.state))


@router.post(
    "/login",
    response_model=SessionDetailResponse,
    summary="Log in",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Email not confirmed"},
        429: {"description": "Too many attempts"},
    },
)
async def login(body: LoginRequest, manager: Session) -> SessionDetailResponse:
    """Log in with email and password."""
    state = await manager.login(body.email, body.password)
    return SessionDetailResponse(data=SessionResponse.from_state(state))


@router.post(
    "/signup",
    response_model=SignupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        409: {"description": "Email already registered"},
        400: {"description": "Weak password or invalid email"},
    },
)
async def signup(body: SignupRequest, manager: Session) -> SignupDetailResponse:
    """
    Register a new account.

    When the backend requires email confirmation, ``requires_confirmation``
    is true and the session stays anonymous until the user confirms.
    """
    result = await manager.signup(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return SignupDetailResponse(
        data=SignupResponse(
            user_id=result.user_id,
            username=result.username,
            requires_confirmation=result.requires_confirmation,
            session=SessionResponse.from_state(result.state),
        )
    )


@router.post(
    "/logout",
    response_model=SessionDetailResponse,
    summary="Log out",
)
async def logout(manager: Session) -> SessionDetailResponse:
    """Log out. Always succeeds."""
    state = await manager.logout()
    return SessionDetailResponse(data=SessionResponse.from_state(state))


@router.post(
    "/refresh-profile",
    response_model=SessionDetailResponse,
    summary="Reload the profile",
)
async def refresh_profile(manager: Session) -> SessionDetailResponse:
    """Reload the profile from the backend; ``profile_stale`` reports failure."""
    state = await manager.refresh_profile()
    return SessionDetailResponse(data=SessionResponse.from_state(state))
