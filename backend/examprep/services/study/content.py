"""
Study Content Generation

Generates study material with the configured LLM:
- Explanations, flashcards, quizzes, revision summaries and
  previous-year-style questions for a topic
- Smart learning room lessons assembled from learner-picked sections
- Answers to free-form doubts
- Question and topic suggestions built from the exam profile and the
  learner's recently studied topics

Usage:
    from examprep.services.study.content import StudyContentService

    service = StudyContentService(topic_service=TopicProgressService(db))
    response = await service.generate(
        StudyContentRequest(subject="Physics", topic="Kinematics", content_type="quiz")
    )
    lesson = await service.smart_learning(
        SmartLearningRequest(topic="Optics", tags=["brief", "mistakes"])
    )
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from examprep.middleware.error_handling import (
    LLMError,
    StoreUnavailableError,
    ValidationError,
)
from examprep.models.progress import TopicProgressItem
from examprep.models.study import (
    DoubtRequest,
    DoubtResponse,
    QuestionSuggestionsResponse,
    SmartLearningRequest,
    SmartLearningResponse,
    StudyContentRequest,
    StudyContentResponse,
    SuggestionRequest,
    TopicSuggestionsResponse,
)
from examprep.services.learning.topic_tracker import TopicProgressService
from examprep.services.llm.client import LLMClient, build_messages, get_llm_client
from examprep.services.llm.parsing import (
    extract_questions,
    extract_topics,
    parse_model_output,
    parse_string_list,
)
from examprep.services.llm.prompts import (
    QUESTION_SUGGESTION_COUNT,
    SYSTEM_PROMPT,
    TOPIC_SUGGESTION_COUNT,
    build_doubt_prompt,
    build_question_suggestions_prompt,
    build_smart_learning_prompt,
    build_study_content_prompt,
    build_topic_suggestions_prompt,
    resolve_content_type,
    resolve_learning_tags,
)

logger = logging.getLogger(__name__)

RECENT_TOPICS_FOR_QUESTIONS = 5
RECENT_TOPICS_FOR_TOPICS = 10

_NEVER = datetime.min.replace(tzinfo=timezone.utc)


class StudyContentService:
    """Generates study material for a topic via the configured LLM."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        topic_service: Optional[TopicProgressService] = None,
    ):
        """
        Initialize the study content service.

        Args:
            llm_client: Completion client (defaults to the shared one).
            topic_service: Source of recently studied topics for suggestions.
                Without one, suggestions use the request profile only.
        """
        self.llm_client = llm_client or get_llm_client()
        self.topic_service = topic_service

    # =========================================================================
    # Topic Material
    # =========================================================================

    async def generate(self, request: StudyContentRequest) -> StudyContentResponse:
        """
        Generate study content.

        Unknown content types are served as explanations.

        Raises:
            LLMError: No provider is configured or generation failed.
        """
        content_type = resolve_content_type(request.content_type)

        prompt = build_study_content_prompt(request.subject, request.topic, content_type)
        text = await self._complete(
            prompt,
            failure=f"Failed to generate {content_type.value} content",
            temperature=0.7,
            max_tokens=2048,
        )

        logger.info(
            f"Generated {content_type.value} for {request.subject}/{request.topic} "
            f"({len(text)} chars)"
        )
        return StudyContentResponse(
            subject=request.subject,
            topic=request.topic,
            content_type=content_type,
            text=text,
        )

    async def smart_learning(
        self, request: SmartLearningRequest
    ) -> SmartLearningResponse:
        """
        Generate one lesson with a section per selected tag.

        The model is asked for {"topic", "sections"} JSON; output that does
        not parse is returned as raw text.

        Raises:
            ValidationError: None of the requested tags is known.
            LLMError: No provider is configured or generation failed.
        """
        tags = resolve_learning_tags(request.tags)
        if not tags:
            raise ValidationError(
                "No valid tags provided",
                details={"tags": request.tags},
            )

        prompt = build_smart_learning_prompt(
            request.topic, tags, subject=request.subject, exam_type=request.exam_type
        )
        text = await self._complete(
            prompt,
            failure="Failed to generate learning room content",
            temperature=0.7,
            max_tokens=4096,
        )

        logger.info(
            f"Generated learning room lesson on '{request.topic}' "
            f"({', '.join(t.value for t in tags)})"
        )
        return SmartLearningResponse(
            topic=request.topic,
            tags=tags,
            content=parse_model_output(text),
        )

    async def ask_doubt(self, request: DoubtRequest) -> DoubtResponse:
        """
        Answer a learner's question, framed by its subject/topic/exam if given.

        Raises:
            LLMError: No provider is configured or generation failed.
        """
        context = request.context
        prompt = build_doubt_prompt(
            request.question,
            subject=context.subject,
            topic=context.topic,
            exam_type=context.exam_type,
        )
        answer = await self._complete(prompt, failure="Failed to answer doubt")
        return DoubtResponse(answer=answer)

    # =========================================================================
    # Suggestions
    # =========================================================================

    async def suggest_questions(
        self, request: SuggestionRequest
    ) -> QuestionSuggestionsResponse:
        """
        Suggest questions the learner may want to ask.

        Raises:
            LLMError: No provider is configured or generation failed.
        """
        recent = await self._recent_topics(request.user_id, RECENT_TOPICS_FOR_QUESTIONS)
        prompt = build_question_suggestions_prompt(
            request.exam_name,
            request.subjects,
            request.topics,
            request.weak_subjects,
            [item.topic for item in recent],
        )
        text = await self._complete(
            prompt,
            failure="Failed to generate question suggestions",
            temperature=0.8,
            max_tokens=1024,
        )

        suggestions = parse_string_list(text)
        if suggestions is None:
            suggestions = extract_questions(text)
        return QuestionSuggestionsResponse(
            suggestions=suggestions[:QUESTION_SUGGESTION_COUNT]
        )

    async def suggest_topics(
        self, request: SuggestionRequest
    ) -> TopicSuggestionsResponse:
        """
        Suggest topics to study next, avoiding recently studied ones.

        Raises:
            LLMError: No provider is configured or generation failed.
        """
        recent = await self._recent_topics(request.user_id, RECENT_TOPICS_FOR_TOPICS)
        prompt = build_topic_suggestions_prompt(
            request.exam_name,
            request.subjects,
            request.topics,
            [f"{item.topic} ({item.subject})" for item in recent],
        )
        text = await self._complete(
            prompt,
            failure="Failed to generate topic suggestions",
            temperature=0.7,
            max_tokens=512,
        )

        topics = parse_string_list(text)
        if topics is None:
            topics = extract_topics(text)
        return TopicSuggestionsResponse(topics=topics[:TOPIC_SUGGESTION_COUNT])

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _complete(
        self,
        prompt: str,
        failure: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        if not self.llm_client.is_configured:
            raise LLMError("No LLM provider is configured")

        try:
            return await self.llm_client.complete(
                messages=build_messages(prompt, system_prompt=SYSTEM_PROMPT),
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise LLMError(failure, details={"error": str(e)}) from e

    async def _recent_topics(
        self, user_id: Optional[str], limit: int
    ) -> list[TopicProgressItem]:
        """
        The learner's most recently active topics, newest first.

        Suggestions still work without them, so a store failure only drops
        this part of the prompt.
        """
        if not user_id or self.topic_service is None:
            return []

        try:
            progress = await self.topic_service.get_topic_progress(user_id)
        except StoreUnavailableError as e:
            logger.warning(f"Recent topics unavailable for {user_id}: {e}")
            return []

        ordered = sorted(
            progress.topics,
            key=lambda item: item.last_studied or item.updated_at or _NEVER,
            reverse=True,
        )
        return ordered[:limit]
