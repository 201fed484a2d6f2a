"""Session manager: who is logged in and what they can do.

All session transitions, whether they come from the auth service's change
notifications or from login/signup/logout/refresh calls made here, are put
on one FIFO queue in arrival order and applied one at a time by a single
consumer task, so the most recently received session wins. While the
manager is running the consumer is the only writer of the session/profile
state. Events carry an arrival number for the logs.
"""

import asyncio
import itertools
import random
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    InsufficientRoleError,
    NotAuthenticatedError,
    SessionClosedError,
    TransientFetchError,
    UsernameTakenError,
)
from domain.entities.profile import Profile, UserRole
from domain.entities.session import (
    AuthChangeEvent,
    AuthSession,
    SessionState,
    SessionStatus,
    SignupResult,
)
from domain.repositories.errors import UniqueViolation
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import IAuthService

logger = structlog.get_logger()

SessionListener = Callable[[SessionState], None]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def generate_username(first_name: str, email: str, rng: random.Random | None = None) -> str:
    """Derive a username from the first name (or email local part) plus 0-999.

    Uniqueness is best-effort only.
    """
    rng = rng or random.Random()
    base = _NON_ALNUM.sub("", first_name.lower())
    if not base:
        base = _NON_ALNUM.sub("", email.split("@")[0].lower())
    return f"{base}{rng.randint(0, 999)}"


class _EventKind(Enum):
    RESTORE = "restore"
    AUTH_CHANGE = "auth_change"
    REFRESH_PROFILE = "refresh_profile"


@dataclass
class _SessionEvent:
    seq: int
    kind: _EventKind
    auth_event: Optional[AuthChangeEvent] = None
    session: Optional[AuthSession] = None
    done: Optional["asyncio.Future[SessionState]"] = field(default=None, repr=False)


def _fail(event: _SessionEvent, error: Exception) -> None:
    if event.done is not None and not event.done.done():
        event.done.set_exception(error)


class SessionManager:
    """Owns the session lifecycle and the current user's profile and role."""

    def __init__(
        self,
        auth_service: IAuthService,
        uow_factory: Callable[[], IUnitOfWork],
        profile_fetch_attempts: int = settings.profile_fetch_attempts,
        profile_fetch_backoff: float = settings.profile_fetch_backoff_seconds,
        username_max_attempts: int = settings.username_max_attempts,
        rng: random.Random | None = None,
    ) -> None:
        self._auth = auth_service
        self._uow_factory = uow_factory
        self._fetch_attempts = max(1, profile_fetch_attempts)
        self._fetch_backoff = profile_fetch_backoff
        self._username_attempts = max(1, username_max_attempts)
        self._rng = rng or random.Random()

        self._state = SessionState()
        self._listeners: List[SessionListener] = []
        self._queue: "asyncio.Queue[_SessionEvent]" = asyncio.Queue()
        self._arrivals = itertools.count(1)
        self._closed = False
        self._consumer: Optional["asyncio.Task[None]"] = None
        self._unsubscribe_auth: Optional[Callable[[], None]] = None

    # --- Read side ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def profile(self) -> Optional[Profile]:
        return self._state.profile

    @property
    def current_user_id(self) -> Optional[UUID]:
        """User id of the authenticated profile, None unless fully authenticated."""
        return self._state.profile.id if self._state.is_authenticated else None

    @property
    def is_admin(self) -> bool:
        return self._state.is_admin

    def require_profile(self) -> Profile:
        """Return the authenticated profile or raise NotAuthenticatedError."""
        if not self._state.is_authenticated or self._state.profile is None:
            raise NotAuthenticatedError()
        return self._state.profile

    def require_admin(self) -> Profile:
        """Return the profile if it has the admin role."""
        profile = self.require_profile()
        if not profile.is_admin:
            raise InsufficientRoleError(UserRole.ADMIN.value)
        return profile

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for state changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Lifecycle ---

    async def start(self) -> SessionState:
        """Start consuming session events and restore the persisted session."""
        self._closed = False
        if self._unsubscribe_auth is None:
            self._unsubscribe_auth = self._auth.on_session_change(self._on_auth_change)
        return await self._submit(_EventKind.RESTORE)

    async def close(self) -> None:
        """Stop listening to the auth service and stop the consumer task.

        Commands still waiting to be applied fail with SessionClosedError.
        """
        self._closed = True
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None

        while not self._queue.empty():
            event = self._queue.get_nowait()
            _fail(event, SessionClosedError())
            self._queue.task_done()

    # --- Commands ---

    async def login(self, email: str, password: str) -> SessionState:
        """
        Sign in with email and password.

        Raises:
            AuthError: If the auth service rejects the attempt
            TransientFetchError: If the session was issued but the profile
                could not be loaded
        """
        session = await self._auth.sign_in_with_password(email.strip().lower(), password)
        logger.info("login_succeeded", user_id=str(session.user_id))

        state = await self._submit(
            _EventKind.AUTH_CHANGE, AuthChangeEvent.SIGNED_IN, session
        )
        if not state.is_authenticated:
            raise TransientFetchError("profile", state.error)
        return state

    async def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str = "",
    ) -> SignupResult:
        """
        Register an account and its profile.

        When the backend requires email confirmation the manager stays
        anonymous and the result has requires_confirmation set.

        Raises:
            AuthError: If the auth service rejects the registration
        """
        email = email.strip().lower()
        first_name = first_name.strip()
        last_name = last_name.strip()
        username = await self._pick_username(first_name, email)

        response = await self._auth.sign_up(
            email,
            password,
            {"first_name": first_name, "last_name": last_name, "username": username},
        )
        await self._ensure_profile(response.user_id, username, first_name, last_name)
        logger.info(
            "signup_succeeded",
            user_id=str(response.user_id),
            requires_confirmation=response.requires_confirmation,
        )

        state = self._state
        if response.session is not None:
            state = await self._submit(
                _EventKind.AUTH_CHANGE, AuthChangeEvent.SIGNED_IN, response.session
            )

        return SignupResult(
            user_id=response.user_id,
            username=username,
            requires_confirmation=response.requires_confirmation,
            state=state,
        )

    async def logout(self) -> SessionState:
        """Sign out. Local state is always cleared, whatever the network says."""
        try:
            await self._auth.sign_out()
        except Exception:
            logger.warning("sign_out_failed", exc_info=True)

        try:
            return await self._submit(
                _EventKind.AUTH_CHANGE, AuthChangeEvent.SIGNED_OUT, None
            )
        except SessionClosedError:
            # No consumer is left to apply it
            self._publish(SessionState(status=SessionStatus.ANONYMOUS))
            return self._state

    async def refresh_profile(self) -> SessionState:
        """Re-fetch the profile. Never raises; failures mark the profile stale."""
        try:
            return await self._submit(_EventKind.REFRESH_PROFILE)
        except SessionClosedError:
            return self._state

    # --- Event channel ---

    def _on_auth_change(
        self, event: AuthChangeEvent, session: Optional[AuthSession]
    ) -> None:
        if self._closed:
            return
        logger.debug("auth_state_changed", auth_event=event.value)
        self._enqueue(_EventKind.AUTH_CHANGE, event, session)

    def _enqueue(
        self,
        kind: _EventKind,
        auth_event: Optional[AuthChangeEvent] = None,
        session: Optional[AuthSession] = None,
        done: Optional["asyncio.Future[SessionState]"] = None,
    ) -> None:
        if self._closed:
            raise SessionClosedError()
        self._ensure_consumer()
        self._queue.put_nowait(
            _SessionEvent(
                seq=next(self._arrivals),
                kind=kind,
                auth_event=auth_event,
                session=session,
                done=done,
            )
        )

    async def _submit(
        self,
        kind: _EventKind,
        auth_event: Optional[AuthChangeEvent] = None,
        session: Optional[AuthSession] = None,
    ) -> SessionState:
        """Enqueue an event and wait until the consumer has applied it."""
        done: "asyncio.Future[SessionState]" = asyncio.get_running_loop().create_future()
        self._enqueue(kind, auth_event, session, done)
        return await done

    def _ensure_consumer(self) -> None:
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.get_running_loop().create_task(self._consume())

    async def _consume(self) -> None:
        # Events are applied in arrival order; the queue is the only path in
        while True:
            event = await self._queue.get()
            try:
                await self._apply(event)
                if event.done is not None and not event.done.done():
                    event.done.set_result(self._state)
            except asyncio.CancelledError:
                _fail(event, SessionClosedError())
                raise
            except Exception as e:
                logger.exception("session_event_failed", kind=event.kind.value, seq=event.seq)
                _fail(event, e)
            finally:
                self._queue.task_done()

    async def _apply(self, event: _SessionEvent) -> None:
        if event.kind is _EventKind.RESTORE:
            await self._restore()
        elif event.kind is _EventKind.REFRESH_PROFILE:
            await self._refresh_profile()
        elif event.session is None:
            self._publish(SessionState(status=SessionStatus.ANONYMOUS))
        else:
            await self._authenticate(
                event.session,
                refetch=event.auth_event == AuthChangeEvent.USER_UPDATED,
            )

    # --- Transitions (consumer task only) ---

    async def _restore(self) -> None:
        self._publish(SessionState(status=SessionStatus.AUTHENTICATING))
        try:
            session = await self._auth.get_session()
        except Exception as e:
            logger.warning("session_restore_failed", error=str(e))
            self._publish(SessionState(status=SessionStatus.ANONYMOUS, error=str(e)))
            return

        if session is None:
            self._publish(SessionState(status=SessionStatus.ANONYMOUS))
            return

        await self._authenticate(session, refetch=True)

    async def _authenticate(self, session: AuthSession, refetch: bool) -> None:
        current = self._state
        same_user = current.is_authenticated and current.user_id == session.user_id
        if same_user and not refetch:
            # Token refresh for the user already loaded
            self._publish(replace(current, session=session))
            return

        self._publish(
            SessionState(
                status=SessionStatus.AUTHENTICATING,
                session=session,
                profile=current.profile if same_user else None,
            )
        )
        try:
            profile = await self._fetch_profile(session.user_id)
        except TransientFetchError as e:
            self._publish(SessionState(status=SessionStatus.ANONYMOUS, error=e.message))
            return

        if profile is None:
            logger.warning("profile_missing", user_id=str(session.user_id))
            self._publish(
                SessionState(status=SessionStatus.ANONYMOUS, error="Profile not found")
            )
            return

        self._publish(
            SessionState(
                status=SessionStatus.AUTHENTICATED,
                session=session,
                profile=profile,
            )
        )

    async def _refresh_profile(self) -> None:
        current = self._state
        if not current.is_authenticated or current.session is None:
            return

        try:
            profile = await self._fetch_profile(current.session.user_id)
        except TransientFetchError as e:
            logger.warning("profile_refresh_failed", user_id=str(current.user_id))
            self._publish(replace(current, profile_stale=True, error=e.message))
            return

        if profile is None:
            logger.warning("profile_missing", user_id=str(current.user_id))
            self._publish(replace(current, profile_stale=True, error="Profile not found"))
            return

        self._publish(replace(current, profile=profile, profile_stale=False, error=None))

    def _publish(self, state: SessionState) -> None:
        state = replace(state, version=self._state.version + 1)
        previous, self._state = self._state, state
        if previous.status != state.status:
            logger.info(
                "session_transition",
                from_status=previous.status.value,
                to_status=state.status.value,
                user_id=str(state.user_id) if state.user_id else None,
            )
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("session_listener_failed")

    # --- Backend helpers ---

    async def _fetch_profile(self, user_id: UUID) -> Optional[Profile]:
        """Load a profile, retrying backend failures with exponential backoff."""
        last_error: Exception | None = None
        for attempt in range(self._fetch_attempts):
            try:
                async with self._uow_factory() as uow:
                    return await uow.profiles.get(user_id)
            except Exception as e:
                last_error = e
                logger.warning(
                    "profile_fetch_failed",
                    user_id=str(user_id),
                    attempt=attempt + 1,
                    error=str(e),
                )
                if attempt + 1 < self._fetch_attempts:
                    await asyncio.sleep(self._fetch_backoff * (2**attempt))

        raise TransientFetchError("profile", str(last_error))

    async def _pick_username(self, first_name: str, email: str) -> str:
        candidate = generate_username(first_name, email, self._rng)
        async with self._uow_factory() as uow:
            for _ in range(self._username_attempts):
                if not await uow.profiles.username_exists(candidate):
                    return candidate
                candidate = generate_username(first_name, email, self._rng)

        logger.warning("username_candidates_exhausted", username=candidate)
        return candidate

    async def _ensure_profile(
        self, user_id: UUID, username: str, first_name: str, last_name: str
    ) -> None:
        """Create the profile row for a new account unless the backend already did."""
        async with self._uow_factory() as uow:
            if await uow.profiles.get(user_id):
                return
            try:
                await uow.profiles.create(
                    Profile(
                        id=user_id,
                        username=username,
                        first_name=first_name or None,
                        last_name=last_name or None,
                    )
                )
            except UniqueViolation as e:
                logger.warning("profile_username_collision", username=username)
                raise UsernameTakenError(username) from e
            await uow.commit()
