"""
SQLAlchemy Database Models

Tables:
- user_profiles: Exam profile and denormalised streak summary per learner
- topic_progress: Per-(user, subject, topic) study metrics and derived strength
- streak_records: The single "current" daily-streak record per learner
- study_notes: Notes saved from generated study content
- study_plans: Generated study plans (structured JSON or raw text)

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    The corresponding Pydantic schemas live in examprep/models/.

    Data flows: Service Layer → Pydantic → SQLAlchemy → Database
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from examprep.db.base import Base


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


# ===========================================
# Learner Profile
# ===========================================


class UserProfile(Base):
    """
    Top-level record for a learner.

    Holds the exam profile configured during onboarding plus a denormalised
    copy of the streak summary so dashboards can read it without touching
    streak_records.

    Attributes:
        user_id: Client-supplied identifier, primary key.
        display_name: Name used to personalise generated messages.
        exam_name: Target exam (e.g. "JEE Main").
        exam_date: Day of the exam, drives urgency in messages and plans.
        subjects: List of subject names.
        topics: Mapping subject -> free-text list of topics.
        daily_study_hours: Hours per day available for study.
        current_streak: Copy of streak_records.current_streak.
        longest_streak: Copy of streak_records.longest_streak.
        last_study_date: Copy of streak_records.last_active_date.
        active_study_plan_id: The plan currently shown to the learner.
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(200))
    exam_name: Mapped[Optional[str]] = mapped_column(String(200))
    exam_date: Mapped[Optional[date]] = mapped_column(Date)
    subjects: Mapped[Optional[list]] = mapped_column(JSON)
    topics: Mapped[Optional[dict]] = mapped_column(JSON)
    daily_study_hours: Mapped[Optional[float]] = mapped_column(Float)

    # Denormalised streak summary
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_study_date: Mapped[Optional[date]] = mapped_column(Date)

    active_study_plan_id: Mapped[Optional[int]] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )


# ===========================================
# Topic Progress
# ===========================================


class TopicProgress(Base):
    """
    Study metrics for one topic of one learner.

    Raw metrics (time_spent_minutes, notes_count, confidence, quiz_avg_score)
    are only ever written together with the derived strength_score and
    strength_label, in the same transaction.

    Attributes:
        id: Surrogate key; insertion order is the natural query order.
        user_id: Owner of the record.
        topic_key: Normalised "subject_topic" identity, unique per user.
        subject: Subject name as entered.
        topic: Topic name as entered.
        time_spent_minutes: Cumulative study minutes, only grows.
        notes_count: Number of notes saved, only grows.
        confidence: Self-rated confidence 1-5, null until first rated.
        quiz_avg_score: Average quiz score 0-100.
        strength_score: Derived 0-100 score.
        strength_label: Derived strong/medium/weak label.
        last_studied: When time was last logged.
        last_note_saved: When a note was last saved.
    """

    __tablename__ = "topic_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "topic_key", name="uq_topic_progress_user_topic"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    topic_key: Mapped[str] = mapped_column(String(500))
    subject: Mapped[str] = mapped_column(String(200), index=True)
    topic: Mapped[str] = mapped_column(String(300))

    # Raw metrics
    time_spent_minutes: Mapped[int] = mapped_column(Integer, default=0)
    notes_count: Mapped[int] = mapped_column(Integer, default=0)
    confidence: Mapped[Optional[int]] = mapped_column(Integer)
    quiz_avg_score: Mapped[float] = mapped_column(Float, default=0.0)

    # Derived
    strength_score: Mapped[Optional[int]] = mapped_column(Integer)
    strength_label: Mapped[Optional[str]] = mapped_column(String(20))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )
    last_studied: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_note_saved: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True)
    )


# ===========================================
# Streaks
# ===========================================


class StreakRecord(Base):
    """
    The current daily study streak of a learner.

    Attributes:
        user_id: Owner, primary key (one record per learner).
        current_streak: Consecutive active days ending at last_active_date.
        longest_streak: Best streak ever, always >= current_streak.
        last_active_date: Calendar day of the last counted activity.
        today_message: Motivational message generated for last_active_date.
        streak_history: Chronological [{"date": "YYYY-MM-DD", "streak": n}],
            bounded to the most recent entries.
    """

    __tablename__ = "streak_records"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_active_date: Mapped[date] = mapped_column(Date)
    today_message: Mapped[Optional[str]] = mapped_column(Text)
    streak_history: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )


# ===========================================
# Notes & Plans
# ===========================================


class StudyNote(Base):
    """A note saved by a learner, usually from generated study content."""

    __tablename__ = "study_notes"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    topic: Mapped[str] = mapped_column(String(300))
    subject: Mapped[str] = mapped_column(String(200), default="")
    content: Mapped[str] = mapped_column(Text)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )


class StudyPlan(Base):
    """
    A generated study plan.

    Exactly one of `plan` (parsed JSON) and `raw_plan` (unparseable model
    output) is set.
    """

    __tablename__ = "study_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("user_profiles.user_id"), index=True
    )
    status: Mapped[str] = mapped_column(String(20), default="active")

    plan: Mapped[Optional[dict]] = mapped_column(JSON)
    raw_plan: Mapped[Optional[str]] = mapped_column(Text)

    # Metadata captured at generation time
    exam_name: Mapped[str] = mapped_column(String(200))
    exam_date: Mapped[date] = mapped_column(Date)
    days_left: Mapped[int] = mapped_column(Integer)
    weeks_left: Mapped[int] = mapped_column(Integer)
    daily_study_hours: Mapped[float] = mapped_column(Float)

    adjusted_based_on_progress: Mapped[bool] = mapped_column(Boolean, default=False)
    topic_strengths: Mapped[Optional[dict]] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
