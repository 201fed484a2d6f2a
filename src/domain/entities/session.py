"""Auth session domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID

from domain.entities.profile import Profile


@dataclass(frozen=True)
class AuthSession:
    """Credentials of an authenticated principal, as issued by the auth service."""

    access_token: str
    refresh_token: str
    user_id: UUID
    email: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None, leeway: timedelta = timedelta(seconds=30)) -> bool:
        """True when the access token is expired or about to expire."""
        now = now or datetime.utcnow()
        return self.expires_at <= now + leeway


class AuthChangeEvent(StrEnum):
    """Session transitions reported by the auth service."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


class SessionStatus(StrEnum):
    """States of the session manager."""

    UNINITIALIZED = "uninitialized"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot published by the session manager on every change."""

    status: SessionStatus = SessionStatus.UNINITIALIZED
    session: AuthSession | None = None
    profile: Profile | None = None
    profile_stale: bool = False
    error: str | None = None
    version: int = 0

    @property
    def user_id(self) -> UUID | None:
        return self.session.user_id if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED and self.profile is not None

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.is_admin


@dataclass(frozen=True)
class SignUpResponse:
    """What the auth service returns for a successful registration."""

    user_id: UUID
    session: AuthSession | None = None
    requires_confirmation: bool = False


@dataclass(frozen=True)
class SignupResult:
    """Outcome of a signup as seen by the caller."""

    user_id: UUID
    username: str
    requires_confirmation: bool
    state: SessionState = field(default_factory=SessionState)
