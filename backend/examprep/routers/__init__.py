"""API Routers package."""

from examprep.routers import health as health_router
from examprep.routers import notes as notes_router
from examprep.routers import streak as streak_router
from examprep.routers import study as study_router
from examprep.routers import tracking as tracking_router
from examprep.routers import users as users_router

__all__ = [
    "health_router",
    "notes_router",
    "streak_router",
    "study_router",
    "tracking_router",
    "users_router",
]
