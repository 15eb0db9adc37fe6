"""
Study Recommendation Service

Derives "what to study next" from the stored topic records. Nothing is
persisted; recommendations are rebuilt on every request.

Weak topics come first (high priority), then medium, then strong. Within a
priority group topics keep the order they were first tracked in.

Usage:
    from examprep.services.learning.recommendations import RecommendationService

    service = RecommendationService(db)
    response = await service.get_recommendations("u1")
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config.scoring import RecommendationPolicy, recommendation_policy
from examprep.db.models import TopicProgress
from examprep.db.transaction import store_transaction
from examprep.enums.learning import StrengthLabel
from examprep.models.progress import (
    Recommendation,
    RecommendationsResponse,
    RecommendationSummary,
)

logger = logging.getLogger(__name__)


class RecommendationService:
    """Builds priority-ordered study recommendations for a learner."""

    def __init__(
        self,
        db: AsyncSession,
        policy: RecommendationPolicy = recommendation_policy,
    ):
        self.db = db
        self.policy = policy

    async def get_recommendations(self, user_id: str) -> RecommendationsResponse:
        """
        Recommend topics to study, most urgent first.

        Args:
            user_id: Learner identifier.

        Returns:
            RecommendationsResponse with the ordered list and per-label counts.
            A learner with no tracked topics gets an empty list and a message.
        """
        async with store_transaction(self.db, "Get recommendations", commit=False):
            records = await self._list_topics(user_id)

        if not records:
            return RecommendationsResponse(message="No topics tracked yet")

        summary = RecommendationSummary(total=len(records))
        recommendations = []

        for record in records:
            label = (
                StrengthLabel(record.strength_label)
                if record.strength_label
                else StrengthLabel.WEAK
            )
            setattr(summary, label.value, getattr(summary, label.value) + 1)

            rule = self.policy.rule_for(label)
            recommendations.append(
                Recommendation(
                    topic=record.topic,
                    subject=record.subject,
                    priority=rule.priority,
                    reason=rule.reason,
                    suggested_time=rule.suggested_time,
                    strength_score=record.strength_score or 0,
                )
            )

        # sorted() is stable, so insertion order survives within a priority
        recommendations = sorted(recommendations, key=lambda r: r.priority.rank)

        logger.debug(
            f"Built {len(recommendations)} recommendations for {user_id} "
            f"(weak={summary.weak}, medium={summary.medium}, strong={summary.strong})"
        )
        return RecommendationsResponse(
            recommendations=recommendations,
            summary=summary,
        )

    async def _list_topics(self, user_id: str) -> list[TopicProgress]:
        result = await self.db.execute(
            select(TopicProgress)
            .where(TopicProgress.user_id == user_id)
            .order_by(TopicProgress.id)
        )
        return list(result.scalars().all())
