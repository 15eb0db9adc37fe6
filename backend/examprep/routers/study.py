"""
Study Material API Router

Endpoints for AI-generated study content, suggestions and study plans.

Endpoints:
- POST /api/study/content - Explanation, flashcards, quiz, summary or PYQs for a topic
- POST /api/study/smart-learning - Lesson built from selected section tags
- POST /api/study/doubt - Answer a free-form question
- POST /api/study/suggestions/questions - Questions the learner may want to ask
- POST /api/study/suggestions/topics - Topics to study next
- POST /api/study/plan - Generate a study plan from an exam profile
- GET /api/study/plan/{user_id} - The learner's active plan
- POST /api/study/plan/adjust - Regenerate the plan from tracked topic strengths
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.base import get_db
from examprep.middleware.error_handling import handle_endpoint_errors
from examprep.middleware.rate_limit import limit_llm
from examprep.models.study import (
    AdjustPlanRequest,
    DoubtRequest,
    DoubtResponse,
    QuestionSuggestionsResponse,
    SmartLearningRequest,
    SmartLearningResponse,
    StudyContentRequest,
    StudyContentResponse,
    StudyPlanRequest,
    StudyPlanResponse,
    SuggestionRequest,
    TopicSuggestionsResponse,
)
from examprep.services.learning import TopicProgressService
from examprep.services.study import StudyContentService, StudyPlanService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/study", tags=["study"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_content_service(
    db: AsyncSession = Depends(get_db),
) -> StudyContentService:
    """Get study content service."""
    return StudyContentService(topic_service=TopicProgressService(db))


async def get_plan_service(
    db: AsyncSession = Depends(get_db),
) -> StudyPlanService:
    """Get study plan service."""
    return StudyPlanService(db)


# ===========================================
# Content Endpoints
# ===========================================


@router.post("/content", response_model=StudyContentResponse)
@limit_llm
@handle_endpoint_errors("Generate study content")
async def generate_study_content(
    request: Request,
    body: StudyContentRequest,
    service: StudyContentService = Depends(get_content_service),
) -> StudyContentResponse:
    """
    Generate study material for a topic.

    contentType is one of explanation, flashcards, quiz, summary, pyq_style;
    anything else is served as an explanation.
    """
    return await service.generate(body)


# ===========================================
# Smart Learning Room & Doubts
# ===========================================


@router.post("/smart-learning", response_model=SmartLearningResponse)
@limit_llm
@handle_endpoint_errors("Generate learning room content")
async def smart_learning(
    request: Request,
    body: SmartLearningRequest,
    service: StudyContentService = Depends(get_content_service),
) -> SmartLearningResponse:
    """
    Build a lesson on a topic from the selected section tags.

    Tags: brief, detailed, questions, analogy, dosdonts, exampoints,
    quickrevision, mistakes. Unknown tags are ignored; a request with no
    known tag is rejected with 422.
    """
    return await service.smart_learning(body)


@router.post("/doubt", response_model=DoubtResponse)
@limit_llm
@handle_endpoint_errors("Answer doubt")
async def ask_doubt(
    request: Request,
    body: DoubtRequest,
    service: StudyContentService = Depends(get_content_service),
) -> DoubtResponse:
    """Answer a free-form question, optionally framed by subject, topic and exam."""
    return await service.ask_doubt(body)


# ===========================================
# Suggestion Endpoints
# ===========================================


@router.post("/suggestions/questions", response_model=QuestionSuggestionsResponse)
@limit_llm
@handle_endpoint_errors("Suggest questions")
async def suggest_questions(
    request: Request,
    body: SuggestionRequest,
    service: StudyContentService = Depends(get_content_service),
) -> QuestionSuggestionsResponse:
    """Suggest questions to ask, from the exam profile and recent topics."""
    return await service.suggest_questions(body)


@router.post("/suggestions/topics", response_model=TopicSuggestionsResponse)
@limit_llm
@handle_endpoint_errors("Suggest topics")
async def suggest_topics(
    request: Request,
    body: SuggestionRequest,
    service: StudyContentService = Depends(get_content_service),
) -> TopicSuggestionsResponse:
    """Suggest what to study next, from the exam profile and recent topics."""
    return await service.suggest_topics(body)


# ===========================================
# Plan Endpoints
# ===========================================


@router.post("/plan", response_model=StudyPlanResponse)
@limit_llm
@handle_endpoint_errors("Generate study plan")
async def generate_study_plan(
    request: Request,
    body: StudyPlanRequest,
    service: StudyPlanService = Depends(get_plan_service),
) -> StudyPlanResponse:
    """
    Generate a study plan and make it the learner's active plan.

    The plan is returned as structured JSON when the model produced valid
    JSON, otherwise as raw text.
    """
    return await service.generate_plan(body)


@router.post("/plan/adjust", response_model=StudyPlanResponse)
@limit_llm
@handle_endpoint_errors("Adjust study plan")
async def adjust_study_plan(
    request: Request,
    body: AdjustPlanRequest,
    service: StudyPlanService = Depends(get_plan_service),
) -> StudyPlanResponse:
    """Regenerate the active plan with subject priorities taken from topic progress."""
    return await service.adjust_plan(body.user_id)


@router.get("/plan/{user_id}", response_model=StudyPlanResponse)
@handle_endpoint_errors("Get study plan")
async def get_study_plan(
    user_id: str,
    service: StudyPlanService = Depends(get_plan_service),
) -> StudyPlanResponse:
    """Get the learner's active study plan, if any."""
    return await service.get_active_plan(user_id)
