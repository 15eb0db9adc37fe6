"""
Daily Study Streak Tracking Service

Keeps one streak record per learner and updates it at most once per
calendar day.

Update rules (diff = today - last active day, in days):
- No record yet: start a streak of 1
- diff == 0: already counted today, nothing changes
- diff == 1: consecutive day, streak + 1
- diff  > 1: a day was missed, streak restarts at 1 (longest kept)

Each counted day appends {date, streak} to a history bounded to the most
recent entries, regenerates the motivational message and copies the
summary onto the learner's profile.

"Today" is the calendar date in settings.STREAK_TIMEZONE.

Usage:
    from examprep.services.learning.streak_tracking import StreakTrackingService

    service = StreakTrackingService(db)
    result = await service.update_streak("u1")
    view = await service.get_streak_data("u1")
"""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config import settings
from examprep.config.scoring import StreakConfig, streak_config
from examprep.db.models import StreakRecord, UserProfile
from examprep.db.transaction import store_transaction
from examprep.models.streak import (
    StreakContext,
    StreakDataResponse,
    StreakUpdateResponse,
)
from examprep.services.learning.motivation import MotivationService

logger = logging.getLogger(__name__)

START_MESSAGE = "🌟 Start your study streak today! Every journey begins with a single step."
RESET_MESSAGE = "😊 Your streak reset, but that's okay! Start fresh today."


class StreakTrackingService:
    """
    Service for daily study streaks.

    update_streak() is the only writer. get_streak_data() is read-only and
    reports a lapsed streak as 0 without persisting the reset.
    """

    def __init__(
        self,
        db: AsyncSession,
        motivation: Optional[MotivationService] = None,
        config: StreakConfig = streak_config,
    ):
        """
        Initialize the streak tracking service.

        Args:
            db: SQLAlchemy async database session.
            motivation: Message generator (defaults to the LLM-backed one).
            config: History bound and exam urgency window.
        """
        self.db = db
        self.motivation = motivation or MotivationService(config=config)
        self.config = config

    @staticmethod
    def _today() -> date:
        return datetime.now(ZoneInfo(settings.STREAK_TIMEZONE)).date()

    async def update_streak(self, user_id: str) -> StreakUpdateResponse:
        """
        Record that the learner studied today.

        Args:
            user_id: Learner identifier.

        Returns:
            StreakUpdateResponse. already_logged is set (and nothing is
            written) when today was already counted.

        Raises:
            StoreUnavailableError: The store failed; nothing was written.
        """
        today = self._today()

        async with store_transaction(self.db, "Update streak"):
            record = await self._get_streak(user_id, lock=True)

            streak_broken = False
            if record is None:
                current_streak = 1
                longest_streak = 1
                history: list[dict] = []
            else:
                diff_days = (today - record.last_active_date).days

                if diff_days <= 0:
                    # Counted already (or clock moved backwards)
                    return StreakUpdateResponse(
                        current_streak=record.current_streak,
                        longest_streak=record.longest_streak,
                        last_active_date=record.last_active_date,
                        message=record.today_message,
                        already_logged=True,
                    )

                if diff_days == 1:
                    current_streak = record.current_streak + 1
                else:
                    current_streak = 1
                    streak_broken = True
                longest_streak = max(record.longest_streak, current_streak)
                history = list(record.streak_history or [])

            profile = await self._get_user(user_id)
            message = await self.motivation.generate_message(
                self._build_context(profile, current_streak, longest_streak, today)
            )

            history.append({"date": today.isoformat(), "streak": current_streak})
            history = history[-self.config.history_limit :]

            is_new_streak = record is None
            if record is None:
                record = StreakRecord(user_id=user_id)
                self.db.add(record)

            record.current_streak = current_streak
            record.longest_streak = longest_streak
            record.last_active_date = today
            record.today_message = message
            record.streak_history = history

            if profile is None:
                profile = UserProfile(user_id=user_id)
                self.db.add(profile)
            profile.current_streak = current_streak
            profile.longest_streak = longest_streak
            profile.last_study_date = today

        logger.info(
            f"Streak for {user_id}: {current_streak} (longest={longest_streak}, "
            f"broken={streak_broken}, new={is_new_streak})"
        )
        return StreakUpdateResponse(
            current_streak=current_streak,
            longest_streak=longest_streak,
            last_active_date=today,
            message=message,
            streak_broken=streak_broken,
            is_new_streak=is_new_streak,
        )

    async def get_streak_data(self, user_id: str) -> StreakDataResponse:
        """
        Read the learner's streak without modifying it.

        Returns:
            StreakDataResponse. A streak whose last active day is more than
            one day ago is reported as 0 with streak_broken set.
        """
        async with store_transaction(self.db, "Get streak", commit=False):
            record = await self._get_streak(user_id)

        if record is None:
            return StreakDataResponse(message=START_MESSAGE)

        history = record.streak_history or []
        diff_days = (self._today() - record.last_active_date).days

        if diff_days > 1:
            return StreakDataResponse(
                current_streak=0,
                longest_streak=record.longest_streak,
                last_active_date=record.last_active_date,
                message=RESET_MESSAGE,
                streak_history=history,
                streak_broken=True,
            )

        return StreakDataResponse(
            current_streak=record.current_streak,
            longest_streak=record.longest_streak,
            last_active_date=record.last_active_date,
            message=record.today_message,
            streak_history=history,
            studied_today=diff_days <= 0,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _build_context(
        profile: Optional[UserProfile],
        current_streak: int,
        longest_streak: int,
        today: date,
    ) -> StreakContext:
        if profile is None:
            return StreakContext(
                current_streak=current_streak, longest_streak=longest_streak
            )

        days_to_exam = None
        if profile.exam_date is not None:
            days_to_exam = (profile.exam_date - today).days

        return StreakContext(
            current_streak=current_streak,
            longest_streak=longest_streak,
            exam_name=profile.exam_name,
            days_to_exam=days_to_exam,
            user_name=profile.display_name,
        )

    async def _get_streak(
        self, user_id: str, lock: bool = False
    ) -> Optional[StreakRecord]:
        query = select(StreakRecord).where(StreakRecord.user_id == user_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_user(self, user_id: str) -> Optional[UserProfile]:
        result = await self.db.execute(
            select(UserProfile).where(UserProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()
