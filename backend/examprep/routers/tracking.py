"""
Topic Tracking API Router

Endpoints for per-topic study metrics and recommendations.

Endpoints:
- POST /api/track/time - Log study minutes on a topic (also counts toward the streak)
- POST /api/track/confidence - Set self-rated confidence for a topic
- GET /api/track/progress/{user_id} - List tracked topics grouped by strength
- GET /api/track/recommendations/{user_id} - What to study next
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.base import get_db
from examprep.middleware.error_handling import (
    StoreUnavailableError,
    handle_endpoint_errors,
)
from examprep.middleware.rate_limit import limit_tracking
from examprep.models.progress import (
    RecommendationsResponse,
    TopicProgressResponse,
    TrackTimeRequest,
    TrackTimeResponse,
    UpdateConfidenceRequest,
    UpdateConfidenceResponse,
)
from examprep.services.learning import (
    RecommendationService,
    StreakTrackingService,
    TopicProgressService,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/track", tags=["tracking"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_topic_service(
    db: AsyncSession = Depends(get_db),
) -> TopicProgressService:
    """Get topic progress service."""
    return TopicProgressService(db)


async def get_recommendation_service(
    db: AsyncSession = Depends(get_db),
) -> RecommendationService:
    """Get recommendation service."""
    return RecommendationService(db)


async def get_streak_service(
    db: AsyncSession = Depends(get_db),
) -> StreakTrackingService:
    """Get streak tracking service."""
    return StreakTrackingService(db)


# ===========================================
# Tracking Endpoints
# ===========================================


@router.post("/time", response_model=TrackTimeResponse)
@limit_tracking
@handle_endpoint_errors("Track study time")
async def track_time(
    request: Request,
    body: TrackTimeRequest,
    service: TopicProgressService = Depends(get_topic_service),
    streak_service: StreakTrackingService = Depends(get_streak_service),
) -> TrackTimeResponse:
    """
    Log minutes studied on a topic.

    Studying counts as activity for the day, so the streak is updated too.
    The minutes are committed before the streak update runs, so a streak
    store failure is only logged and the tracked time is still returned.
    """
    result = await service.track_time_spent(
        body.user_id, body.subject, body.topic, body.minutes
    )
    try:
        await streak_service.update_streak(body.user_id)
    except StoreUnavailableError as e:
        logger.warning(f"Streak not updated for {body.user_id} after tracking time: {e}")
    return result


@router.post("/confidence", response_model=UpdateConfidenceResponse)
@limit_tracking
@handle_endpoint_errors("Update topic confidence")
async def update_confidence(
    request: Request,
    body: UpdateConfidenceRequest,
    service: TopicProgressService = Depends(get_topic_service),
) -> UpdateConfidenceResponse:
    """
    Set self-rated confidence (1-5) for a topic.

    Values outside 1-5 are clamped; the response carries the stored value.
    """
    return await service.update_confidence(
        body.user_id, body.subject, body.topic, body.confidence
    )


# ===========================================
# Query Endpoints
# ===========================================


@router.get("/progress/{user_id}", response_model=TopicProgressResponse)
@handle_endpoint_errors("Get topic progress")
async def get_topic_progress(
    user_id: str,
    subject: Optional[str] = Query(None, description="Only topics of this subject"),
    service: TopicProgressService = Depends(get_topic_service),
) -> TopicProgressResponse:
    """Get all tracked topics with a strong/medium/weak grouping."""
    return await service.get_topic_progress(user_id, subject=subject)


@router.get("/recommendations/{user_id}", response_model=RecommendationsResponse)
@handle_endpoint_errors("Get study recommendations")
async def get_recommendations(
    user_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    """
    Get study recommendations ordered by priority.

    Weak topics come first with longer suggested sessions; strong topics
    only get a quick revision slot.
    """
    return await service.get_recommendations(user_id)
