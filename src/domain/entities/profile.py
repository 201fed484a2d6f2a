"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class UserRole(StrEnum):
    """Application role stored on the profile."""

    USER = "user"
    ADMIN = "admin"


@dataclass
class Profile:
    """Domain entity for a user profile, keyed by the auth user id."""

    id: UUID
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    role: UserRole = UserRole.USER
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def display_name(self) -> str:
        """First and last name, falling back to the username."""
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.username
