"""
Study Material API Models (Pydantic)

Schemas for AI-generated study content, learning room lessons, doubts,
suggestions, study plans, saved notes and the learner's exam profile.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field

from examprep.enums.learning import LearningTag, StrengthLabel, StudyContentType
from examprep.models.base import StrictRequest, StrictResponse, SuccessResponse


# ===========================================
# Parsed Model Output
# ===========================================


class StructuredContent(StrictResponse):
    """Model output that parsed as a JSON object."""

    kind: Literal["structured"] = "structured"
    data: dict[str, Any]


class RawContent(StrictResponse):
    """Model output that could not be parsed; returned verbatim."""

    kind: Literal["raw"] = "raw"
    text: str


ParsedContent = Annotated[
    Union[StructuredContent, RawContent], Field(discriminator="kind")
]


# ===========================================
# Study Content
# ===========================================


class StudyContentRequest(StrictRequest):
    """
    Ask for study material on a topic.

    Unknown content types fall back to an explanation rather than failing.
    """

    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    content_type: Optional[str] = None


class StudyContentResponse(SuccessResponse):
    subject: str
    topic: str
    content_type: StudyContentType
    text: str


# ===========================================
# Smart Learning Room & Doubts
# ===========================================


class SmartLearningRequest(StrictRequest):
    """
    Build a lesson on a topic from the sections the learner picked.

    Unknown tags are dropped; at least one known tag must remain.
    """

    topic: str = Field(..., min_length=1)
    subject: str = ""
    exam_type: str = ""
    tags: list[str] = Field(..., min_length=1)


class SmartLearningResponse(SuccessResponse):
    topic: str
    tags: list[LearningTag]
    content: ParsedContent


class DoubtContext(StrictRequest):
    subject: Optional[str] = None
    topic: Optional[str] = None
    exam_type: Optional[str] = None


class DoubtRequest(StrictRequest):
    question: str = Field(..., min_length=1)
    context: DoubtContext = Field(default_factory=DoubtContext)


class DoubtResponse(SuccessResponse):
    answer: str


# ===========================================
# Suggestions
# ===========================================


class SuggestionRequest(StrictRequest):
    """
    Profile the suggestion prompts are built from.

    When user_id is given, the learner's recently studied topics are added.
    weak_subjects (subject -> confidence 1-5) only affects question
    suggestions.
    """

    user_id: Optional[str] = None
    exam_name: Optional[str] = None
    subjects: list[str] = Field(default_factory=list)
    topics: dict[str, str] = Field(default_factory=dict)
    weak_subjects: dict[str, int] = Field(default_factory=dict)


class QuestionSuggestionsResponse(SuccessResponse):
    suggestions: list[str] = Field(default_factory=list)


class TopicSuggestionsResponse(SuccessResponse):
    topics: list[str] = Field(default_factory=list)


# ===========================================
# Study Plans
# ===========================================


class StudyPlanRequest(StrictRequest):
    """
    Generate a study plan.

    Attributes:
        subjects: Subjects to cover.
        topics: Subject -> free-text topics.
        weak_subjects: Subject -> confidence 1-5 (default 3).
        daily_study_hours: Hours available per day (default 4).
    """

    user_id: str = Field(..., min_length=1)
    exam_name: str = Field(..., min_length=1)
    exam_date: date
    subjects: list[str] = Field(..., min_length=1)
    topics: Optional[dict[str, str]] = None
    weak_subjects: dict[str, int] = Field(default_factory=dict)
    daily_study_hours: float = Field(default=4, gt=0, le=24)


class AdjustPlanRequest(StrictRequest):
    user_id: str = Field(..., min_length=1)


class StudyPlanMetadata(StrictResponse):
    exam_name: str
    exam_date: date
    days_left: int
    weeks_left: int
    daily_study_hours: float
    generated_at: datetime


class TopicStrengthEntry(StrictResponse):
    topic: str
    strength: StrengthLabel
    score: int


class PlanAdjustments(StrictResponse):
    subject_confidence: dict[str, int]
    topic_breakdown: dict[str, list[TopicStrengthEntry]]


class StudyPlanResponse(SuccessResponse):
    """
    A generated or stored study plan.

    `plan` is None when no active plan exists; `message` explains why.
    """

    plan_id: Optional[int] = None
    plan: Optional[ParsedContent] = None
    metadata: Optional[StudyPlanMetadata] = None
    adjustments: Optional[PlanAdjustments] = None
    message: Optional[str] = None


# ===========================================
# Notes
# ===========================================


class SaveNoteRequest(StrictRequest):
    user_id: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    subject: str = ""
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)


class SaveNoteResponse(SuccessResponse):
    note_id: int
    notes_count: Optional[int] = None
    strength_score: Optional[int] = None


class NoteItem(StrictResponse):
    id: int
    topic: str
    subject: str = ""
    content: str
    tags: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class NotesResponse(SuccessResponse):
    notes: list[NoteItem] = Field(default_factory=list)


# ===========================================
# Exam Profile
# ===========================================


class UserProfileUpdate(StrictRequest):
    """Fields set during onboarding; omitted fields are left unchanged."""

    display_name: Optional[str] = None
    exam_name: Optional[str] = None
    exam_date: Optional[date] = None
    subjects: Optional[list[str]] = None
    topics: Optional[dict[str, str]] = None
    daily_study_hours: Optional[float] = Field(default=None, gt=0, le=24)


class UserProfileItem(StrictResponse):
    user_id: str
    display_name: Optional[str] = None
    exam_name: Optional[str] = None
    exam_date: Optional[date] = None
    subjects: Optional[list[str]] = None
    topics: Optional[dict[str, str]] = None
    daily_study_hours: Optional[float] = None
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: Optional[date] = None
    active_study_plan_id: Optional[int] = None


class UserProfileResponse(SuccessResponse):
    profile: Optional[UserProfileItem] = None
    message: Optional[str] = None
