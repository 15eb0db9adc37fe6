"""
Streak API Models (Pydantic)

Request/response schemas for daily study streaks.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field

from examprep.models.base import StrictRequest, StrictResponse, SuccessResponse


class StreakHistoryEntry(StrictResponse):
    """Streak length reached on a given calendar day."""

    date: datetime.date
    streak: int


class StreakContext(BaseModel):
    """
    Everything the motivational message generator needs to know.

    Attributes:
        current_streak: Streak length after today's update (0 when lapsed).
        longest_streak: Best streak so far.
        exam_name: Target exam, if the learner configured one.
        days_to_exam: Whole days until the exam, if known.
        user_name: Display name for personalisation.
    """

    current_streak: int
    longest_streak: int
    exam_name: Optional[str] = None
    days_to_exam: Optional[int] = None
    user_name: Optional[str] = None


class UpdateStreakRequest(StrictRequest):
    user_id: str = Field(..., min_length=1)


class StreakUpdateResponse(SuccessResponse):
    """
    Result of recording today's activity.

    Flags:
        already_logged: Today was already counted; nothing changed.
        streak_broken: At least one day was missed; the streak restarted at 1.
        is_new_streak: This was the learner's first ever streak update.
    """

    current_streak: int
    longest_streak: int
    last_active_date: datetime.date
    message: Optional[str] = None
    already_logged: bool = False
    streak_broken: bool = False
    is_new_streak: bool = False


class StreakDataResponse(SuccessResponse):
    """
    Read-only view of a learner's streak.

    When more than one day has passed since the last activity the view
    reports current_streak=0 and streak_broken=True even though the stored
    record still holds the old value; the next update persists the reset.
    """

    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[datetime.date] = None
    message: Optional[str] = None
    streak_history: list[StreakHistoryEntry] = Field(default_factory=list)
    studied_today: bool = False
    streak_broken: bool = False
