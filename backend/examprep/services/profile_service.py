"""
Exam Profile Service

Reads and updates the learner's exam profile (exam name and date,
subjects, topics, daily hours). The streak summary fields on the profile
are written by the streak tracker, never here.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.models import UserProfile
from examprep.db.transaction import store_transaction
from examprep.models.study import (
    UserProfileItem,
    UserProfileResponse,
    UserProfileUpdate,
)

logger = logging.getLogger(__name__)


class UserProfileService:
    """CRUD for exam profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: str) -> UserProfileResponse:
        async with store_transaction(self.db, "Get profile", commit=False):
            profile = await self._get_user(user_id)

        if profile is None:
            return UserProfileResponse(message="Profile not found")
        return UserProfileResponse(profile=UserProfileItem.model_validate(profile))

    async def update_profile(
        self, user_id: str, update: UserProfileUpdate
    ) -> UserProfileResponse:
        """
        Create or partially update a profile.

        Only fields present in the request are written.
        """
        changes = update.model_dump(exclude_unset=True)

        async with store_transaction(self.db, "Update profile"):
            profile = await self._get_user(user_id, lock=True)
            if profile is None:
                profile = UserProfile(user_id=user_id, current_streak=0, longest_streak=0)
                self.db.add(profile)
            for field, value in changes.items():
                setattr(profile, field, value)

        logger.info(f"Updated profile for {user_id}: {sorted(changes)}")
        return UserProfileResponse(profile=UserProfileItem.model_validate(profile))

    async def _get_user(self, user_id: str, lock: bool = False) -> Optional[UserProfile]:
        query = select(UserProfile).where(UserProfile.user_id == user_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
