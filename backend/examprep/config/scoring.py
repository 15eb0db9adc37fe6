"""
Scoring and Streak Configuration

Immutable configuration objects for the topic strength scorer, the
recommendation policy and the streak tracker. Defaults match
config/default.yaml; the YAML sections `scoring`, `recommendations` and
`streak` override them.

The scorer takes a ScoringConfig argument rather than reading module
constants, so alternate weightings can be tested without patching.

Usage:
    from examprep.config.scoring import scoring_config

    weights = scoring_config.weights
    threshold = scoring_config.strong_threshold
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from examprep.config.settings import yaml_config
from examprep.enums.learning import RecommendationPriority, StrengthLabel


class _FrozenConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ScoringWeights(_FrozenConfig):
    """Weights of each normalised metric in the strength score (sum to 1.0)."""

    time: float = 0.30
    notes: float = 0.25
    confidence: float = 0.35
    quiz: float = 0.10

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeights":
        total = self.time + self.notes + self.confidence + self.quiz
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"scoring weights must sum to 1.0, got {total}")
        return self


class ScoringConfig(_FrozenConfig):
    """
    Strength scoring parameters.

    Attributes:
        weights: Metric weights.
        time_saturation_minutes: Cumulative minutes that count as 100%.
        notes_saturation: Saved notes that count as 100%.
        default_confidence: Confidence assumed when a topic was never rated.
        min_confidence: Lower clamp bound for confidence ratings.
        max_confidence: Upper clamp bound for confidence ratings.
        strong_threshold: Scores at or above are labelled strong.
        medium_threshold: Scores at or above (and below strong) are medium.
    """

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    time_saturation_minutes: int = Field(default=120, gt=0)
    notes_saturation: int = Field(default=5, gt=0)
    default_confidence: int = 3
    min_confidence: int = 1
    max_confidence: int = 5
    strong_threshold: int = 70
    medium_threshold: int = 40

    @model_validator(mode="after")
    def _check_bounds(self) -> "ScoringConfig":
        if self.min_confidence >= self.max_confidence:
            raise ValueError("min_confidence must be below max_confidence")
        if not self.min_confidence <= self.default_confidence <= self.max_confidence:
            raise ValueError("default_confidence must lie within the confidence range")
        if self.medium_threshold > self.strong_threshold:
            raise ValueError("medium_threshold must not exceed strong_threshold")
        return self


class RecommendationRule(_FrozenConfig):
    """What a recommendation looks like for one strength bucket."""

    priority: RecommendationPriority
    reason: str
    suggested_time: int


class RecommendationPolicy(_FrozenConfig):
    """Strength label -> recommendation rule."""

    weak: RecommendationRule = RecommendationRule(
        priority=RecommendationPriority.HIGH,
        reason="Needs more practice",
        suggested_time=45,
    )
    medium: RecommendationRule = RecommendationRule(
        priority=RecommendationPriority.MEDIUM,
        reason="Good progress, keep practicing",
        suggested_time=30,
    )
    strong: RecommendationRule = RecommendationRule(
        priority=RecommendationPriority.LOW,
        reason="Quick revision recommended",
        suggested_time=15,
    )

    def rule_for(self, label: StrengthLabel) -> RecommendationRule:
        return getattr(self, label.value)


class StreakConfig(_FrozenConfig):
    """Streak tracker parameters."""

    history_limit: int = Field(default=30, gt=0)
    exam_urgency_days: int = Field(default=30, gt=0)


def _section(name: str) -> dict[str, Any]:
    return yaml_config.get(name) or {}


scoring_config = ScoringConfig(**_section("scoring"))
recommendation_policy = RecommendationPolicy(**_section("recommendations"))
streak_config = StreakConfig(**_section("streak"))
