"""API routers."""

from motosense.api.predictions import router as predictions_router
from motosense.api.races import riders_router
from motosense.api.races import router as races_router
from motosense.api.rounds import router as rounds_router
from motosense.api.sync import router as sync_router
from motosense.api.users import leaderboard_router
from motosense.api.users import router as users_router

__all__ = [
    "races_router",
    "riders_router",
    "predictions_router",
    "rounds_router",
    "sync_router",
    "users_router",
    "leaderboard_router",
]
