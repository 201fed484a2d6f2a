"""Supabase Auth (GoTrue) client.

Talks to the REST API directly with httpx and keeps the session in a JSON
file so it survives restarts, like the mobile client's persisted storage.

GoTrue token response structure:
    {
        "access_token": "<jwt>",
        "refresh_token": "abc123",
        "expires_in": 3600,
        "expires_at": 1234567890,
        "user": { "id": "user-uuid", "email": "user@example.com", ... }
    }
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Optional
from uuid import UUID

import httpx
import orjson
import structlog
from jose import JWTError, jwt

from core.config import settings
from core.exceptions import AuthError, AuthErrorCode
from domain.entities.session import AuthChangeEvent, AuthSession, SignUpResponse
from infrastructure.auth.provider import SessionChangeCallback

logger = structlog.get_logger()

# GoTrue error_code values and message fragments -> domain reasons.
# Message fragments cover older GoTrue versions that only send a message.
_ERROR_CODES: dict[str, AuthErrorCode] = {
    "invalid_credentials": AuthErrorCode.INVALID_CREDENTIALS,
    "email_not_confirmed": AuthErrorCode.UNCONFIRMED,
    "over_request_rate_limit": AuthErrorCode.RATE_LIMITED,
    "over_email_send_rate_limit": AuthErrorCode.RATE_LIMITED,
    "user_already_exists": AuthErrorCode.ALREADY_REGISTERED,
    "email_exists": AuthErrorCode.ALREADY_REGISTERED,
    "weak_password": AuthErrorCode.WEAK_PASSWORD,
    "email_address_invalid": AuthErrorCode.INVALID_EMAIL,
    "validation_failed": AuthErrorCode.INVALID_EMAIL,
}

_ERROR_MESSAGES: list[tuple[str, AuthErrorCode]] = [
    ("invalid login credentials", AuthErrorCode.INVALID_CREDENTIALS),
    ("email not confirmed", AuthErrorCode.UNCONFIRMED),
    ("too many requests", AuthErrorCode.RATE_LIMITED),
    ("rate limit", AuthErrorCode.RATE_LIMITED),
    ("user already registered", AuthErrorCode.ALREADY_REGISTERED),
    ("password should be at least", AuthErrorCode.WEAK_PASSWORD),
    ("unable to validate email address", AuthErrorCode.INVALID_EMAIL),
    ("invalid format", AuthErrorCode.INVALID_EMAIL),
]


def map_auth_error(status_code: int, body: dict[str, Any]) -> tuple[AuthErrorCode, str]:
    """Translate a GoTrue error response into a reason and the raw message."""
    message = str(
        body.get("msg")
        or body.get("message")
        or body.get("error_description")
        or body.get("error")
        or ""
    )

    code = body.get("error_code") or body.get("code")
    if isinstance(code, str) and code in _ERROR_CODES:
        return _ERROR_CODES[code], message

    lowered = message.lower()
    for fragment, reason in _ERROR_MESSAGES:
        if fragment in lowered:
            return reason, message

    if status_code == 429:
        return AuthErrorCode.RATE_LIMITED, message

    return AuthErrorCode.UNKNOWN, message


def parse_session(body: dict[str, Any], now: datetime | None = None) -> AuthSession:
    """Build an AuthSession from a GoTrue token response."""
    access_token = body["access_token"]
    user = body.get("user") or {}

    try:
        claims = jwt.get_unverified_claims(access_token)
    except JWTError:
        claims = {}

    now = now or datetime.utcnow()
    if body.get("expires_at"):
        expires_at = datetime.utcfromtimestamp(int(body["expires_at"]))
    elif body.get("expires_in"):
        expires_at = now + timedelta(seconds=int(body["expires_in"]))
    elif claims.get("exp"):
        expires_at = datetime.utcfromtimestamp(int(claims["exp"]))
    else:
        expires_at = now + timedelta(hours=1)

    return AuthSession(
        access_token=access_token,
        refresh_token=body.get("refresh_token", ""),
        user_id=UUID(str(user.get("id") or claims["sub"])),
        email=user.get("email") or claims.get("email", ""),
        expires_at=expires_at,
    )


class FileSessionStorage:
    """Persists the current session as JSON on disk."""

    def __init__(self, path: str | Path = settings.session_file) -> None:
        self._path = Path(path)

    def read(self) -> Optional[AuthSession]:
        if not self._path.exists():
            return None
        try:
            data = orjson.loads(self._path.read_bytes())
            return AuthSession(
                access_token=data["access_token"],
                refresh_token=data["refresh_token"],
                user_id=UUID(data["user_id"]),
                email=data["email"],
                expires_at=datetime.fromisoformat(data["expires_at"]),
            )
        except (orjson.JSONDecodeError, KeyError, ValueError):
            logger.warning("persisted_session_unreadable", path=str(self._path))
            return None

    def write(self, session: AuthSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(
            orjson.dumps(
                {
                    "access_token": session.access_token,
                    "refresh_token": session.refresh_token,
                    "user_id": str(session.user_id),
                    "email": session.email,
                    "expires_at": session.expires_at.isoformat(),
                }
            )
        )

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class SupabaseAuthClient:
    """IAuthService implementation backed by Supabase Auth."""

    def __init__(
        self,
        base_url: str = settings.supabase_auth_url,
        anon_key: str = settings.supabase_anon_key,
        storage: FileSessionStorage | None = None,
        timeout: float = settings.auth_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._storage = storage or FileSessionStorage()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"apikey": anon_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._listeners: list[SessionChangeCallback] = []

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        body = await self._post(
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = parse_session(body)
        self._storage.write(session)
        self._emit(AuthChangeEvent.SIGNED_IN, session)
        return session

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpResponse:
        body = await self._post(
            "/signup",
            json={"email": email, "password": password, "data": metadata},
        )

        # With email confirmation enabled GoTrue answers with the bare user.
        if body.get("access_token"):
            session = parse_session(body)
            self._storage.write(session)
            self._emit(AuthChangeEvent.SIGNED_IN, session)
            return SignUpResponse(user_id=session.user_id, session=session)

        user = body.get("user") or body
        return SignUpResponse(user_id=UUID(str(user["id"])), requires_confirmation=True)

    async def sign_out(self) -> None:
        session = self._storage.read()
        try:
            if session:
                response = await self._client.post(
                    "/logout",
                    headers={"Authorization": f"Bearer {session.access_token}"},
                )
                # An already revoked token is as good as a successful logout
                if response.status_code not in (401, 403, 404):
                    response.raise_for_status()
        finally:
            self._storage.clear()
            self._emit(AuthChangeEvent.SIGNED_OUT, None)

    async def get_session(self) -> Optional[AuthSession]:
        session = self._storage.read()
        if session is None or not session.is_expired():
            return session
        return await self.refresh_session(session)

    async def refresh_session(
        self, session: AuthSession | None = None
    ) -> Optional[AuthSession]:
        """Exchange the refresh token for a new session.

        A rejected refresh token means the session was revoked: storage is
        cleared and SIGNED_OUT is emitted. Network errors propagate.
        """
        session = session or self._storage.read()
        if session is None:
            return None

        response = await self._client.post(
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": session.refresh_token},
        )
        if 400 <= response.status_code < 500:
            logger.info("session_refresh_rejected", status_code=response.status_code)
            self._storage.clear()
            self._emit(AuthChangeEvent.SIGNED_OUT, None)
            return None
        response.raise_for_status()

        refreshed = parse_session(response.json())
        self._storage.write(refreshed)
        self._emit(AuthChangeEvent.TOKEN_REFRESHED, refreshed)
        return refreshed

    def on_session_change(self, callback: SessionChangeCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- Internal helpers ---

    async def _post(self, path: str, **kwargs: Any) -> dict[str, Any]:
        """POST to GoTrue and return the JSON body, raising AuthError on failure."""
        try:
            response = await self._client.post(path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("auth_request_failed", path=path, error=str(e))
            raise AuthError(AuthErrorCode.UNKNOWN, str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            reason, message = map_auth_error(response.status_code, body)
            logger.info(
                "auth_request_rejected",
                path=path,
                status_code=response.status_code,
                reason=reason.value,
            )
            raise AuthError(reason, message or None)

        return body

    def _emit(self, event: AuthChangeEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception("session_listener_failed", auth_event=event.value)
