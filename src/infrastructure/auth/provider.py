"""Authentication service protocol."""

from typing import Any, Callable, Optional, Protocol

from domain.entities.session import AuthChangeEvent, AuthSession, SignUpResponse

SessionChangeCallback = Callable[[AuthChangeEvent, Optional[AuthSession]], None]


class IAuthService(Protocol):
    """Protocol for the external auth service."""

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Exchange an email/password pair for a session.

        Raises:
            AuthError: If the service rejects the credentials
        """
        ...

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpResponse:
        """
        Register a new account.

        Returns:
            SignUpResponse with a session, or requires_confirmation set when
            the account must confirm its email first

        Raises:
            AuthError: If the registration is rejected
        """
        ...

    async def sign_out(self) -> None:
        """Revoke the current session and clear persisted storage."""
        ...

    async def get_session(self) -> Optional[AuthSession]:
        """Return the persisted session, refreshing it if it has expired."""
        ...

    def on_session_change(self, callback: SessionChangeCallback) -> Callable[[], None]:
        """
        Register a listener for session transitions.

        Returns:
            A callable that removes the listener
        """
        ...
