"""
Topic Progress Tracking Service

Records study events against (user, subject, topic) records and keeps the
derived strength score in step with the raw metrics.

Responsibilities:
- Accumulate study minutes and saved-note counts
- Store self-rated confidence (clamped into range)
- Recompute strength score and label in the same write as every mutation
- List a learner's topics grouped by strength

Each event runs as one transaction that reads the topic record with a row
lock, so two concurrent events on the same topic are applied one after the
other instead of overwriting each other.

Usage:
    from examprep.services.learning.topic_tracker import TopicProgressService

    service = TopicProgressService(db)
    result = await service.track_time_spent("u1", "Physics", "Kinematics", 30)
    progress = await service.get_topic_progress("u1", subject="Physics")
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config.scoring import ScoringConfig, scoring_config
from examprep.db.models import TopicProgress
from examprep.db.transaction import store_transaction
from examprep.enums.learning import StrengthLabel
from examprep.middleware.error_handling import ValidationError
from examprep.models.progress import (
    GroupedTopics,
    TopicMetrics,
    TopicProgressItem,
    TopicProgressResponse,
    TrackNoteResponse,
    TrackTimeResponse,
    UpdateConfidenceResponse,
)
from examprep.services.learning.strength import (
    clamp_confidence,
    compute_strength,
    normalize_topic_key,
)

logger = logging.getLogger(__name__)


class TopicProgressService:
    """
    Service for per-topic study metrics.

    All mutations go through _rescore() before commit, so strength_score and
    strength_label never lag behind the raw metrics.
    """

    def __init__(self, db: AsyncSession, config: ScoringConfig = scoring_config):
        """
        Initialize the topic progress service.

        Args:
            db: SQLAlchemy async database session.
            config: Scoring parameters used for every recomputation.
        """
        self.db = db
        self.config = config

    # =========================================================================
    # Events
    # =========================================================================

    async def track_time_spent(
        self,
        user_id: str,
        subject: str,
        topic: str,
        minutes: int,
    ) -> TrackTimeResponse:
        """
        Add study minutes to a topic.

        Args:
            user_id: Learner identifier.
            subject: Subject name.
            topic: Topic name.
            minutes: Minutes studied, must be positive.

        Returns:
            TrackTimeResponse with the new cumulative minutes and score.

        Raises:
            ValidationError: minutes is zero or negative.
            StoreUnavailableError: The store failed; nothing was written.
        """
        if minutes <= 0:
            raise ValidationError(
                "minutes must be a positive number",
                details={"minutes": minutes},
            )

        async with store_transaction(self.db, "Track time"):
            record = await self._get_or_create(user_id, subject, topic)
            record.time_spent_minutes = (record.time_spent_minutes or 0) + minutes
            record.last_studied = datetime.now(timezone.utc)
            self._rescore(record)

        logger.info(
            f"Tracked {minutes} min on {record.topic_key} for {user_id} "
            f"(total={record.time_spent_minutes}, score={record.strength_score})"
        )
        return TrackTimeResponse(
            time_spent_minutes=record.time_spent_minutes,
            strength_score=record.strength_score,
        )

    async def track_note_saved(
        self,
        user_id: str,
        subject: str,
        topic: str,
    ) -> TrackNoteResponse:
        """
        Count one more saved note against a topic.

        Returns:
            TrackNoteResponse with the new note count and score.

        Raises:
            StoreUnavailableError: The store failed; nothing was written.
        """
        async with store_transaction(self.db, "Track note"):
            record = await self.apply_note_saved(user_id, subject, topic)

        return TrackNoteResponse(
            notes_count=record.notes_count,
            strength_score=record.strength_score,
        )

    async def apply_note_saved(
        self,
        user_id: str,
        subject: str,
        topic: str,
    ) -> TopicProgress:
        """
        Count a saved note inside the caller's transaction.

        Nothing is committed here; callers that store the note itself in the
        same transaction use this so the note and the count land together.
        """
        record = await self._get_or_create(user_id, subject, topic)
        record.notes_count = (record.notes_count or 0) + 1
        record.last_note_saved = datetime.now(timezone.utc)
        self._rescore(record)

        logger.debug(f"Note saved on {record.topic_key} for {user_id}")
        return record

    async def update_confidence(
        self,
        user_id: str,
        subject: str,
        topic: str,
        confidence: int,
    ) -> UpdateConfidenceResponse:
        """
        Overwrite the self-rated confidence of a topic.

        Out-of-range ratings are clamped rather than rejected; the response
        carries the value actually stored.

        Raises:
            StoreUnavailableError: The store failed; nothing was written.
        """
        stored = clamp_confidence(confidence, self.config)

        async with store_transaction(self.db, "Update confidence"):
            record = await self._get_or_create(user_id, subject, topic)
            record.confidence = stored
            self._rescore(record)

        return UpdateConfidenceResponse(
            confidence=stored,
            strength_score=record.strength_score,
            strength_label=StrengthLabel(record.strength_label),
        )

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_topic_progress(
        self,
        user_id: str,
        subject: Optional[str] = None,
    ) -> TopicProgressResponse:
        """
        List a learner's topic records, optionally for one subject.

        Topics without a label yet are grouped as weak.
        """
        async with store_transaction(self.db, "Get topic progress", commit=False):
            records = await self._list_topics(user_id, subject)

        topics = [TopicProgressItem.model_validate(r) for r in records]
        grouped = GroupedTopics()
        for item in topics:
            label = item.strength_label or StrengthLabel.WEAK
            getattr(grouped, label.value).append(item)

        return TopicProgressResponse(topics=topics, grouped=grouped)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _rescore(self, record: TopicProgress) -> None:
        metrics = TopicMetrics(
            time_spent_minutes=record.time_spent_minutes or 0,
            notes_count=record.notes_count or 0,
            confidence=record.confidence,
            quiz_avg_score=record.quiz_avg_score or 0.0,
        )
        result = compute_strength(metrics, self.config)
        record.strength_score = result.score
        record.strength_label = result.label.value

    async def _get_or_create(
        self,
        user_id: str,
        subject: str,
        topic: str,
    ) -> TopicProgress:
        topic_key = normalize_topic_key(subject, topic)
        record = await self._get_topic(user_id, topic_key)
        if record is None:
            record = TopicProgress(
                user_id=user_id,
                topic_key=topic_key,
                subject=subject,
                topic=topic,
                time_spent_minutes=0,
                notes_count=0,
                confidence=None,
                quiz_avg_score=0.0,
            )
            self.db.add(record)
        return record

    async def _get_topic(self, user_id: str, topic_key: str) -> Optional[TopicProgress]:
        """Fetch one topic record, locking it for the rest of the transaction."""
        result = await self.db.execute(
            select(TopicProgress)
            .where(
                TopicProgress.user_id == user_id,
                TopicProgress.topic_key == topic_key,
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _list_topics(
        self,
        user_id: str,
        subject: Optional[str] = None,
    ) -> list[TopicProgress]:
        """Fetch topic records in insertion order."""
        query = select(TopicProgress).where(TopicProgress.user_id == user_id)
        if subject:
            query = query.where(TopicProgress.subject == subject)
        result = await self.db.execute(query.order_by(TopicProgress.id))
        return list(result.scalars().all())
