"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.auth import router as auth_router
from api.v1.routes.evaluations import game_evaluations_router
from api.v1.routes.evaluations import router as evaluations_router
from api.v1.routes.games import router as games_router
from api.v1.routes.leaderboard import router as leaderboard_router
from api.v1.routes.lists import game_lists_router
from api.v1.routes.lists import router as lists_router
from api.v1.routes.profile import router as profile_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(profile_router)
router.include_router(games_router)
router.include_router(game_evaluations_router)
router.include_router(evaluations_router)
router.include_router(game_lists_router)
router.include_router(lists_router)
router.include_router(leaderboard_router)
