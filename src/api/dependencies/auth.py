"""Session dependencies for FastAPI."""

from typing import Annotated, Optional

from fastapi import Depends, Request

from domain.entities.profile import Profile
from domain.services.session_manager import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    """The process-wide session manager created by the application factory."""
    return request.app.state.session_manager


async def get_current_profile(
    manager: SessionManager = Depends(get_session_manager),
) -> Profile:
    """
    Dependency to get the logged in user's profile.

    Raises:
        NotAuthenticatedError: If no user is fully authenticated
    """
    return manager.require_profile()


async def get_optional_profile(
    manager: SessionManager = Depends(get_session_manager),
) -> Optional[Profile]:
    """The logged in user's profile, or None (no exception raised)."""
    return manager.profile if manager.state.is_authenticated else None


# Type aliases for convenience in route handlers
Session = Annotated[SessionManager, Depends(get_session_manager)]
CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
OptionalProfile = Annotated[Optional[Profile], Depends(get_optional_profile)]
