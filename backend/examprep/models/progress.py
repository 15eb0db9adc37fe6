"""
Topic Progress API Models (Pydantic)

Request/response schemas for topic tracking, strength scoring and study
recommendations.

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for API validation.
    The corresponding SQLAlchemy model is examprep.db.models.TopicProgress.

    Data flows: API Request → Pydantic → Service → SQLAlchemy → Database
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from examprep.enums.learning import RecommendationPriority, StrengthLabel
from examprep.models.base import StrictRequest, StrictResponse, SuccessResponse


# ===========================================
# Strength Scoring Models
# ===========================================


class TopicMetrics(BaseModel):
    """
    Raw per-topic metrics fed into the strength scorer.

    Missing values are coerced to defaults: no time, no notes, neutral
    confidence (applied by the scorer) and no quiz score.
    """

    model_config = ConfigDict(frozen=True)

    time_spent_minutes: int = Field(default=0, ge=0)
    notes_count: int = Field(default=0, ge=0)
    confidence: Optional[int] = None
    quiz_avg_score: float = Field(default=0.0, ge=0, le=100)


class StrengthResult(BaseModel):
    """Output of the strength scorer."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    label: StrengthLabel


# ===========================================
# Tracking Requests
# ===========================================


class TrackTimeRequest(StrictRequest):
    """
    Log study minutes against a topic.

    `minutes` must be positive; the tracker rejects anything else before
    touching the store.
    """

    user_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    minutes: int


class UpdateConfidenceRequest(StrictRequest):
    """
    Set the self-rated confidence for a topic.

    Any integer is accepted; the tracker clamps it into [1, 5].
    """

    user_id: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    confidence: int


# ===========================================
# Tracking Responses
# ===========================================


class TrackTimeResponse(SuccessResponse):
    time_spent_minutes: int
    strength_score: int


class TrackNoteResponse(SuccessResponse):
    notes_count: int
    strength_score: int


class UpdateConfidenceResponse(SuccessResponse):
    confidence: int
    strength_score: int
    strength_label: StrengthLabel


class TopicProgressItem(StrictResponse):
    """One stored topic record as returned to the client."""

    id: str = Field(..., validation_alias="topic_key")
    subject: str
    topic: str
    time_spent_minutes: int = 0
    notes_count: int = 0
    confidence: Optional[int] = None
    quiz_avg_score: float = 0.0
    strength_score: Optional[int] = None
    strength_label: Optional[StrengthLabel] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_studied: Optional[datetime] = None
    last_note_saved: Optional[datetime] = None


class GroupedTopics(StrictResponse):
    """Topics bucketed by strength label; unlabelled topics count as weak."""

    strong: list[TopicProgressItem] = Field(default_factory=list)
    medium: list[TopicProgressItem] = Field(default_factory=list)
    weak: list[TopicProgressItem] = Field(default_factory=list)


class TopicProgressResponse(SuccessResponse):
    topics: list[TopicProgressItem] = Field(default_factory=list)
    grouped: GroupedTopics = Field(default_factory=GroupedTopics)


# ===========================================
# Recommendations
# ===========================================


class Recommendation(StrictResponse):
    """
    A suggestion of what to study next.

    Derived on every request from the stored topic records; never persisted.
    """

    topic: str
    subject: str
    priority: RecommendationPriority
    reason: str
    suggested_time: int  # Minutes
    strength_score: int


class RecommendationSummary(StrictResponse):
    total: int = 0
    strong: int = 0
    medium: int = 0
    weak: int = 0


class RecommendationsResponse(SuccessResponse):
    recommendations: list[Recommendation] = Field(default_factory=list)
    summary: RecommendationSummary = Field(default_factory=RecommendationSummary)
    message: Optional[str] = None
