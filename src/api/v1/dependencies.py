"""Dependency injection factories for API v1."""

from typing import Callable

from fastapi import Depends, Request

from api.dependencies.auth import get_session_manager
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.evaluation_service import EvaluationService
from domain.services.game_service import GameService
from domain.services.leaderboard_service import LeaderboardService
from domain.services.list_membership_service import ListMembershipService
from domain.services.profile_service import ProfileService
from domain.services.session_manager import SessionManager


def get_uow_factory(request: Request) -> Callable[[], IUnitOfWork]:
    """Factory for creating Unit of Work instances."""
    return request.app.state.uow_factory


def get_game_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> GameService:
    """Get Game service instance."""
    return GameService(uow_factory)


def get_list_membership_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> ListMembershipService:
    """Get ListMembership service instance."""
    return ListMembershipService(uow_factory)


def get_evaluation_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> EvaluationService:
    """Get Evaluation service instance."""
    return EvaluationService(uow_factory)


def get_leaderboard_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> LeaderboardService:
    """Get Leaderboard service instance."""
    return LeaderboardService(uow_factory)


def get_profile_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    session_manager: SessionManager = Depends(get_session_manager),
) -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(uow_factory, session_manager)
