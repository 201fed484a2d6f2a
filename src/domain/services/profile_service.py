"""Profile service layer with business logic."""

from typing import Callable, Optional
from uuid import UUID

from core.exceptions import NotAuthenticatedError, UsernameTakenError, ValidationError
from domain.entities.profile import Profile
from domain.repositories.errors import UniqueViolation
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_manager import SessionManager


class ProfileService:
    """Edits the user's own profile and asks the session manager to reload it."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_manager: SessionManager,
    ) -> None:
        self._uow_factory = uow_factory
        self._session_manager = session_manager

    async def update(
        self,
        user_id: Optional[UUID],
        first_name: str,
        last_name: str,
        username: str,
    ) -> Optional[Profile]:
        """Update name and username, then refresh the session's profile."""
        if user_id is None:
            raise NotAuthenticatedError()

        first_name = first_name.strip()
        username = username.strip()
        if not first_name:
            raise ValidationError("Nome é obrigatório", field="first_name")
        if len(username) < 3:
            raise ValidationError(
                "Username deve ter pelo menos 3 caracteres", field="username"
            )

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise NotAuthenticatedError("Profile not found")

            if await uow.profiles.username_exists(username, exclude_id=user_id):
                raise UsernameTakenError(username)

            profile.first_name = first_name
            profile.last_name = last_name.strip() or None
            profile.username = username
            try:
                await uow.profiles.update(profile)
            except UniqueViolation as e:
                raise UsernameTakenError(username) from e
            await uow.commit()

        state = await self._session_manager.refresh_profile()
        return state.profile
