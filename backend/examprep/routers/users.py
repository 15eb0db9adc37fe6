"""
User Profile API Router

Endpoints:
- GET /api/users/{user_id}/profile - Exam profile and streak summary
- PUT /api/users/{user_id}/profile - Create or update the exam profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.base import get_db
from examprep.middleware.error_handling import handle_endpoint_errors
from examprep.models.study import UserProfileResponse, UserProfileUpdate
from examprep.services.profile_service import UserProfileService

router = APIRouter(prefix="/api/users", tags=["users"])


async def get_profile_service(
    db: AsyncSession = Depends(get_db),
) -> UserProfileService:
    """Get profile service."""
    return UserProfileService(db)


@router.get("/{user_id}/profile", response_model=UserProfileResponse)
@handle_endpoint_errors("Get profile")
async def get_profile(
    user_id: str,
    service: UserProfileService = Depends(get_profile_service),
) -> UserProfileResponse:
    return await service.get_profile(user_id)


@router.put("/{user_id}/profile", response_model=UserProfileResponse)
@handle_endpoint_errors("Update profile")
async def update_profile(
    user_id: str,
    body: UserProfileUpdate,
    service: UserProfileService = Depends(get_profile_service),
) -> UserProfileResponse:
    """Set onboarding fields. Fields left out of the body are not changed."""
    return await service.update_profile(user_id, body)
