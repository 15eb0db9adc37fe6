"""
Study Plan Service

Generates exam study plans with the LLM, stores them and re-generates them
from tracked topic progress.

Plan lifecycle:
- A learner has at most one active plan (UserProfile.active_study_plan_id)
- Generating or adjusting a plan supersedes the previous active one
- Model output that is not valid JSON is kept verbatim as raw_plan

Adjustment:
    Per subject, the average topic strength (0-100) is mapped onto a 1-5
    confidence, round(avg / 100 * 4) + 1, which drives subject priority in
    the regenerated plan.

Usage:
    from examprep.services.study.plans import StudyPlanService

    service = StudyPlanService(db)
    response = await service.generate_plan(request)
    active = await service.get_active_plan("u1")
    adjusted = await service.adjust_plan("u1")
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.config import settings
from examprep.db.models import StudyPlan, UserProfile
from examprep.db.transaction import store_transaction
from examprep.enums.learning import StrengthLabel, StudyPlanStatus
from examprep.middleware.error_handling import LLMError
from examprep.models.progress import TopicProgressItem
from examprep.models.study import (
    ParsedContent,
    PlanAdjustments,
    RawContent,
    StructuredContent,
    StudyPlanMetadata,
    StudyPlanRequest,
    StudyPlanResponse,
    TopicStrengthEntry,
)
from examprep.services.learning.strength import round_half_up
from examprep.services.learning.topic_tracker import TopicProgressService
from examprep.services.llm.client import LLMClient, build_messages, get_llm_client
from examprep.services.llm.parsing import parse_model_output
from examprep.services.llm.prompts import SYSTEM_PROMPT, build_study_plan_prompt

logger = logging.getLogger(__name__)

DEFAULT_DAILY_HOURS = 4.0


def build_adjustments(topics: list[TopicProgressItem]) -> PlanAdjustments:
    """
    Derive per-subject confidence from tracked topic strengths.

    Unscored topics count as weak with score 0. Subjects appear in the
    order their first topic was tracked.
    """
    if not topics:
        return PlanAdjustments(subject_confidence={}, topic_breakdown={})

    df = pd.DataFrame(
        [
            {
                "subject": t.subject,
                "topic": t.topic,
                "strength": (t.strength_label or StrengthLabel.WEAK).value,
                "score": t.strength_score or 0,
            }
            for t in topics
        ]
    )

    subject_confidence = {}
    topic_breakdown = {}
    for subject, group in df.groupby("subject", sort=False):
        avg_score = float(group["score"].mean())
        subject_confidence[subject] = round_half_up(avg_score / 100 * 4) + 1
        topic_breakdown[subject] = [
            TopicStrengthEntry(
                topic=row.topic,
                strength=StrengthLabel(row.strength),
                score=int(row.score),
            )
            for row in group.itertuples(index=False)
        ]

    return PlanAdjustments(
        subject_confidence=subject_confidence,
        topic_breakdown=topic_breakdown,
    )


class StudyPlanService:
    """Service for generating, storing and adjusting study plans."""

    def __init__(
        self,
        db: AsyncSession,
        llm_client: Optional[LLMClient] = None,
        topic_service: Optional[TopicProgressService] = None,
    ):
        """
        Initialize the study plan service.

        Args:
            db: SQLAlchemy async database session.
            llm_client: Client used for plan generation.
            topic_service: Source of topic progress for adjustments.
        """
        self.db = db
        self.llm_client = llm_client or get_llm_client()
        self.topic_service = topic_service or TopicProgressService(db)

    @staticmethod
    def _today() -> date:
        return datetime.now(ZoneInfo(settings.STREAK_TIMEZONE)).date()

    # =========================================================================
    # Operations
    # =========================================================================

    async def generate_plan(self, request: StudyPlanRequest) -> StudyPlanResponse:
        """
        Generate and store a new active plan from an explicit exam profile.

        Raises:
            LLMError: Generation failed.
            StoreUnavailableError: The plan could not be stored.
        """
        parsed, metadata = await self._generate(
            exam_name=request.exam_name,
            exam_date=request.exam_date,
            subjects=request.subjects,
            topics=request.topics or {},
            subject_confidence=request.weak_subjects,
            daily_hours=request.daily_study_hours,
        )
        plan_id = await self._store_plan(request.user_id, parsed, metadata)

        return StudyPlanResponse(plan_id=plan_id, plan=parsed, metadata=metadata)

    async def get_active_plan(self, user_id: str) -> StudyPlanResponse:
        """
        Fetch the learner's active plan.

        Returns a response with plan=None and a message when there is none.
        """
        async with store_transaction(self.db, "Get study plan", commit=False):
            profile = await self._get_user(user_id)
            if profile is None or profile.active_study_plan_id is None:
                return StudyPlanResponse(message="No active study plan")
            plan = await self._get_plan(profile.active_study_plan_id)

        if plan is None:
            return StudyPlanResponse(message="Study plan not found")

        return self._to_response(plan)

    async def adjust_plan(self, user_id: str) -> StudyPlanResponse:
        """
        Regenerate the plan using tracked topic strengths as subject confidence.

        Needs an exam profile (exam name, date and subjects); without one the
        response carries plan=None and a message.

        Raises:
            LLMError: Generation failed.
            StoreUnavailableError: Reading progress or storing the plan failed.
        """
        progress = await self.topic_service.get_topic_progress(user_id)

        async with store_transaction(self.db, "Load exam profile", commit=False):
            profile = await self._get_user(user_id)

        if profile is None or not (
            profile.exam_name and profile.exam_date and profile.subjects
        ):
            return StudyPlanResponse(
                message="No exam profile found. Complete onboarding first."
            )

        adjustments = build_adjustments(progress.topics)
        parsed, metadata = await self._generate(
            exam_name=profile.exam_name,
            exam_date=profile.exam_date,
            subjects=list(profile.subjects),
            topics=profile.topics or {},
            subject_confidence=adjustments.subject_confidence,
            daily_hours=profile.daily_study_hours or DEFAULT_DAILY_HOURS,
        )
        plan_id = await self._store_plan(
            user_id, parsed, metadata, adjustments=adjustments
        )

        logger.info(
            f"Adjusted study plan {plan_id} for {user_id} "
            f"(confidence={adjustments.subject_confidence})"
        )
        return StudyPlanResponse(
            plan_id=plan_id,
            plan=parsed,
            metadata=metadata,
            adjustments=adjustments,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _generate(
        self,
        exam_name: str,
        exam_date: date,
        subjects: list[str],
        topics: dict[str, str],
        subject_confidence: dict[str, int],
        daily_hours: float,
    ) -> tuple[ParsedContent, StudyPlanMetadata]:
        days_left = (exam_date - self._today()).days
        weeks_left = math.ceil(days_left / 7)

        if not self.llm_client.is_configured:
            raise LLMError("No LLM provider is configured")

        prompt = build_study_plan_prompt(
            exam_name=exam_name,
            exam_date=exam_date,
            days_left=days_left,
            weeks_left=weeks_left,
            daily_hours=daily_hours,
            subjects=subjects,
            topics=topics,
            subject_confidence=subject_confidence,
        )
        try:
            text = await self.llm_client.complete(
                messages=build_messages(prompt, system_prompt=SYSTEM_PROMPT),
                temperature=0.7,
                max_tokens=4096,
            )
        except Exception as e:
            raise LLMError(
                "Failed to generate study plan", details={"error": str(e)}
            ) from e

        parsed = parse_model_output(text)
        if isinstance(parsed, RawContent):
            logger.warning(f"Study plan for {exam_name} was not valid JSON, kept raw")

        metadata = StudyPlanMetadata(
            exam_name=exam_name,
            exam_date=exam_date,
            days_left=days_left,
            weeks_left=weeks_left,
            daily_study_hours=daily_hours,
            generated_at=datetime.now(timezone.utc),
        )
        return parsed, metadata

    async def _store_plan(
        self,
        user_id: str,
        parsed: ParsedContent,
        metadata: StudyPlanMetadata,
        adjustments: Optional[PlanAdjustments] = None,
    ) -> Optional[int]:
        async with store_transaction(self.db, "Store study plan"):
            profile = await self._get_user(user_id, lock=True)
            if profile is None:
                profile = UserProfile(user_id=user_id)
                self.db.add(profile)
                await self.db.flush()

            await self.db.execute(
                update(StudyPlan)
                .where(
                    StudyPlan.user_id == user_id,
                    StudyPlan.status == StudyPlanStatus.ACTIVE.value,
                )
                .values(status=StudyPlanStatus.SUPERSEDED.value)
            )

            plan = StudyPlan(
                user_id=user_id,
                status=StudyPlanStatus.ACTIVE.value,
                plan=parsed.data if isinstance(parsed, StructuredContent) else None,
                raw_plan=parsed.text if isinstance(parsed, RawContent) else None,
                exam_name=metadata.exam_name,
                exam_date=metadata.exam_date,
                days_left=metadata.days_left,
                weeks_left=metadata.weeks_left,
                daily_study_hours=metadata.daily_study_hours,
                adjusted_based_on_progress=adjustments is not None,
                topic_strengths=(
                    adjustments.model_dump(mode="json") if adjustments else None
                ),
                created_at=metadata.generated_at,
            )
            self.db.add(plan)
            await self.db.flush()
            profile.active_study_plan_id = plan.id

        return plan.id

    @staticmethod
    def _to_response(plan: StudyPlan) -> StudyPlanResponse:
        parsed: ParsedContent
        if plan.plan is not None:
            parsed = StructuredContent(data=plan.plan)
        else:
            parsed = RawContent(text=plan.raw_plan or "")

        adjustments = None
        if plan.adjusted_based_on_progress and plan.topic_strengths:
            adjustments = PlanAdjustments.model_validate(plan.topic_strengths)

        return StudyPlanResponse(
            plan_id=plan.id,
            plan=parsed,
            metadata=StudyPlanMetadata(
                exam_name=plan.exam_name,
                exam_date=plan.exam_date,
                days_left=plan.days_left,
                weeks_left=plan.weeks_left,
                daily_study_hours=plan.daily_study_hours,
                generated_at=plan.created_at,
            ),
            adjustments=adjustments,
        )

    async def _get_user(self, user_id: str, lock: bool = False) -> Optional[UserProfile]:
        query = select(UserProfile).where(UserProfile.user_id == user_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_plan(self, plan_id: int) -> Optional[StudyPlan]:
        result = await self.db.execute(select(StudyPlan).where(StudyPlan.id == plan_id))
        return result.scalar_one_or_none()
