"""
Streak API Router

Endpoints:
- GET /api/streak/{user_id} - Current streak, history and today's message
- POST /api/streak/update - Record today's study activity
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.base import get_db
from examprep.middleware.error_handling import handle_endpoint_errors
from examprep.middleware.rate_limit import limit_tracking
from examprep.models.streak import (
    StreakDataResponse,
    StreakUpdateResponse,
    UpdateStreakRequest,
)
from examprep.services.learning import StreakTrackingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/streak", tags=["streak"])


async def get_streak_service(
    db: AsyncSession = Depends(get_db),
) -> StreakTrackingService:
    """Get streak tracking service."""
    return StreakTrackingService(db)


@router.get("/{user_id}", response_model=StreakDataResponse)
@handle_endpoint_errors("Get streak")
async def get_streak(
    user_id: str,
    service: StreakTrackingService = Depends(get_streak_service),
) -> StreakDataResponse:
    """
    Get the learner's streak.

    Read-only: a lapsed streak is reported as 0 but only reset in storage
    by the next update.
    """
    return await service.get_streak_data(user_id)


@router.post("/update", response_model=StreakUpdateResponse)
@limit_tracking
@handle_endpoint_errors("Update streak")
async def update_streak(
    request: Request,
    body: UpdateStreakRequest,
    service: StreakTrackingService = Depends(get_streak_service),
) -> StreakUpdateResponse:
    """Count today as a study day. Repeated calls on the same day are no-ops."""
    return await service.update_streak(body.user_id)
