"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

# Settings are read on first import of core.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.exceptions import AuthError, AuthErrorCode
from domain.entities.session import AuthChangeEvent, AuthSession, SignUpResponse
from infrastructure.auth.provider import SessionChangeCallback
from infrastructure.database.models import Base, GameModel, ProfileModel

TEST_EMAIL = "ana@example.com"
TEST_PASSWORD = "secret123"
ADMIN_EMAIL = "admin@example.com"


def make_session(user_id: UUID, email: str = TEST_EMAIL, ttl: int = 3600) -> AuthSession:
    """Build an auth session for a user."""
    return AuthSession(
        access_token=f"access-{uuid4().hex}",
        refresh_token=f"refresh-{uuid4().hex}",
        user_id=user_id,
        email=email,
        expires_at=datetime.utcnow() + timedelta(seconds=ttl),
    )


class FakeAuthService:
    """In-memory stand-in for the Supabase auth service.

    Accounts are registered up front; failures can be forced per call.
    """

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, UUID]] = {}
        self.unconfirmed: set[str] = set()
        self.require_confirmation = False
        self.persisted: Optional[AuthSession] = None
        self.sign_in_error: Optional[Exception] = None
        self.sign_out_error: Optional[Exception] = None
        self.sign_out_calls = 0
        self.last_metadata: dict[str, Any] = {}
        self._listeners: list[SessionChangeCallback] = []

    def register(
        self,
        email: str,
        password: str = TEST_PASSWORD,
        user_id: Optional[UUID] = None,
        confirmed: bool = True,
    ) -> UUID:
        user_id = user_id or uuid4()
        self.accounts[email] = (password, user_id)
        if not confirmed:
            self.unconfirmed.add(email)
        return user_id

    def emit(self, event: AuthChangeEvent, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        if self.sign_in_error is not None:
            raise self.sign_in_error
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError(AuthErrorCode.INVALID_CREDENTIALS)
        if email in self.unconfirmed:
            raise AuthError(AuthErrorCode.UNCONFIRMED)

        session = make_session(account[1], email)
        self.persisted = session
        self.emit(AuthChangeEvent.SIGNED_IN, session)
        return session

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpResponse:
        if email in self.accounts:
            raise AuthError(AuthErrorCode.ALREADY_REGISTERED)
        if len(password) < 6:
            raise AuthError(AuthErrorCode.WEAK_PASSWORD)

        self.last_metadata = metadata
        user_id = self.register(email, password, confirmed=not self.require_confirmation)
        if self.require_confirmation:
            return SignUpResponse(user_id=user_id, requires_confirmation=True)

        session = make_session(user_id, email)
        self.persisted = session
        self.emit(AuthChangeEvent.SIGNED_IN, session)
        return SignUpResponse(user_id=user_id, session=session)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        try:
            if self.sign_out_error is not None:
                raise self.sign_out_error
        finally:
            self.persisted = None
            self.emit(AuthChangeEvent.SIGNED_OUT, None)

    async def get_session(self) -> Optional[AuthSession]:
        return self.persisted

    def on_session_change(self, callback: SessionChangeCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh SQLite file database with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]) -> Callable[[], Any]:
    """Unit of Work factory bound to the test database."""
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_service() -> FakeAuthService:
    """Fake auth service; the user fixtures register their accounts in it."""
    return FakeAuthService()


@pytest.fixture
async def test_user_id(
    session_factory: async_sessionmaker[AsyncSession], auth_service: FakeAuthService
) -> UUID:
    """A confirmed account with a regular profile."""
    user_id = auth_service.register(TEST_EMAIL)
    async with session_factory() as session:
        session.add(ProfileModel(id=user_id, username="ana123", first_name="Ana"))
        await session.commit()
    return user_id


@pytest.fixture
async def admin_user_id(
    session_factory: async_sessionmaker[AsyncSession], auth_service: FakeAuthService
) -> UUID:
    """A confirmed account with an admin profile."""
    user_id = auth_service.register(ADMIN_EMAIL)
    async with session_factory() as session:
        session.add(
            ProfileModel(id=user_id, username="admin1", first_name="Admin", role="admin")
        )
        await session.commit()
    return user_id


@pytest.fixture
async def game_ids(session_factory: async_sessionmaker[AsyncSession]) -> list[int]:
    """Three catalog games, in insertion order."""
    models = [
        GameModel(name="Azul", min_players=2, max_players=4, playing_time=45),
        GameModel(name="Catan", min_players=3, max_players=4, playing_time=90),
        GameModel(name="Wingspan", min_players=1, max_players=5, playing_time=70),
    ]
    async with session_factory() as session:
        session.add_all(models)
        await session.commit()
        return [model.id for model in models]


@pytest.fixture
async def client(
    auth_service: FakeAuthService,
    uow_factory: Callable[[], Any],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client with the fake auth service and test database.

    The transport does not run lifespan events, so the session manager is
    started and closed here.
    """
    from main import create_app

    app = create_app(auth_service=auth_service, uow_factory=uow_factory)
    manager = app.state.session_manager
    await manager.start()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    await manager.close()


@pytest.fixture
async def authenticated_client(
    client: AsyncClient, test_user_id: UUID
) -> AsyncClient:
    """Client whose session is logged in as the regular test user."""
    response = await client.post(
        "/api/v1/auth/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
async def admin_client(client: AsyncClient, admin_user_id: UUID) -> AsyncClient:
    """Client whose session is logged in as the admin."""
    response = await client.post(
        "/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    return client
