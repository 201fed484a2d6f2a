"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile, UserRole
from domain.repositories.errors import UniqueViolation
from infrastructure.database.integrity import is_unique_violation
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def username_exists(self, username: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another profile already uses a username."""
        stmt = select(func.count()).select_from(ProfileModel).where(
            ProfileModel.username == username
        )
        if exclude_id is not None:
            stmt = stmt.where(ProfileModel.id != exclude_id)
        result = await self._session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UniqueViolation("profiles_username_key") from e
            raise
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update name and username of an existing profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.first_name = profile.first_name
        model.last_name = profile.last_name
        model.username = profile.username

        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UniqueViolation("profiles_username_key") from e
            raise
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            username=model.username,
            first_name=model.first_name,
            last_name=model.last_name,
            avatar_url=model.avatar_url,
            role=UserRole(model.role),
            created_at=model.created_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            username=entity.username,
            first_name=entity.first_name,
            last_name=entity.last_name,
            avatar_url=entity.avatar_url,
            role=entity.role.value,
            created_at=entity.created_at,
        )
