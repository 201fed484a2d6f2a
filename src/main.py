"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable, Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.session_manager import SessionManager
from infrastructure.auth.provider import IAuthService
from infrastructure.auth.supabase_auth import SupabaseAuthClient
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


def default_uow_factory() -> IUnitOfWork:
    """Unit of Work bound to the application's database."""
    return SQLAlchemyUnitOfWork(async_session_factory)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Restore the persisted session on startup and release clients on shutdown."""
    manager: SessionManager = app.state.session_manager
    state = await manager.start()
    logger.info("session_restored", status=state.status.value)

    yield

    await manager.close()
    aclose = getattr(app.state.auth_service, "aclose", None)
    if aclose is not None:
        await aclose()


def create_app(
    auth_service: Optional[IAuthService] = None,
    uow_factory: Optional[Callable[[], IUnitOfWork]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``auth_service`` and ``uow_factory`` default to the Supabase client and
    the configured database.
    """
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Ludo List\n\n"
            "Local API for the Ludo List board game app: browse the catalog, "
            "keep a collection, a wishlist and a played list, rate games and "
            "see the community leaderboard.\n\n"
            "### Session\n"
            "The server holds one session at a time. Log in through "
            "`POST /api/v1/auth/login`; the session is persisted between runs "
            "and restored on startup.\n\n"
            "### Roles\n"
            "Adding, editing and deleting catalog games requires the admin role."
        ),
        version="1.0.0",
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "auth", "description": "Login, signup and session state"},
            {"name": "profile", "description": "The logged in user's profile"},
            {"name": "games", "description": "Game catalog"},
            {"name": "evaluations", "description": "Ratings and comments"},
            {"name": "lists", "description": "Collection, wishlist and played lists"},
            {"name": "leaderboard", "description": "Top rated games"},
        ],
    )

    app.state.auth_service = auth_service or SupabaseAuthClient()
    app.state.uow_factory = uow_factory or default_uow_factory
    app.state.session_manager = SessionManager(
        app.state.auth_service, app.state.uow_factory
    )

    # Tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
