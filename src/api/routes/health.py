"""Health check endpoints."""

from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies.auth import Session
from api.v1.dependencies import get_uow_factory
from core.config import settings
from domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    auth_configured: bool | None = None
    session: str | None = None
    profile_stale: bool | None = None


async def _database_status(uow_factory: Callable[[], IUnitOfWork]) -> str:
    try:
        async with uow_factory() as uow:
            await uow.ping()
    except Exception as e:
        return f"unhealthy: {e}"
    return "healthy"


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Database and session status",
)
async def detailed_health_check(
    manager: Session,
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> HealthResponse:
    """
    Check the database and report the session state.

    A stale profile does not degrade the status; the last loaded profile
    is still served.
    """
    db_status = await _database_status(uow_factory)
    state = manager.state

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        version=VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
        auth_configured=bool(settings.supabase_auth_url),
        session=state.status.value,
        profile_stale=state.profile_stale,
    )
