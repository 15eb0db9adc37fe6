"""
Topic Strength Scoring

Pure functions that turn raw per-topic study metrics into a 0-100 strength
score and a strong/medium/weak label.

Each metric is normalised to 0-100 before weighting:
- time:       min(minutes / 120 * 100, 100)
- notes:      min(notes / 5 * 100, 100)
- confidence: (confidence - 1) / 4 * 100, neutral 3 when never rated
- quiz:       average quiz score as-is

The weighted sum is rounded half-up to an integer.

Usage:
    from examprep.models.progress import TopicMetrics
    from examprep.services.learning.strength import compute_strength

    result = compute_strength(TopicMetrics(time_spent_minutes=60, notes_count=2))
    result.score   # 43
    result.label   # StrengthLabel.MEDIUM
"""

import math
import re
from typing import Optional

from examprep.config.scoring import ScoringConfig, scoring_config
from examprep.enums.learning import StrengthLabel
from examprep.models.progress import StrengthResult, TopicMetrics

_WHITESPACE = re.compile(r"\s+")


def normalize_topic_key(subject: str, topic: str) -> str:
    """
    Build the stable identity of a (subject, topic) pair.

    Whitespace runs collapse to a single underscore and the result is
    lower-cased, so "Physics", "Rotational  Motion" -> "physics_rotational_motion".
    """
    return _WHITESPACE.sub("_", f"{subject}_{topic}".strip()).lower()


def clamp_confidence(value: int, config: ScoringConfig = scoring_config) -> int:
    """Clamp a self-rated confidence into the configured range."""
    return max(config.min_confidence, min(config.max_confidence, int(value)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (42.5 -> 43)."""
    # Trim float noise so x.5 boundaries round consistently
    return int(math.floor(round(value, 9) + 0.5))


def strength_label(score: int, config: ScoringConfig = scoring_config) -> StrengthLabel:
    """Map a strength score onto its label."""
    if score >= config.strong_threshold:
        return StrengthLabel.STRONG
    if score >= config.medium_threshold:
        return StrengthLabel.MEDIUM
    return StrengthLabel.WEAK


def compute_strength(
    metrics: TopicMetrics,
    config: ScoringConfig = scoring_config,
) -> StrengthResult:
    """
    Compute the strength score and label of a topic.

    Args:
        metrics: Raw metrics of the topic. Absent confidence counts as the
            configured default.
        config: Weights, saturation caps and label thresholds.

    Returns:
        StrengthResult with an integer score in [0, 100] and its label.
    """
    confidence: Optional[int] = metrics.confidence
    if confidence is None:
        confidence = config.default_confidence

    time_score = min(
        metrics.time_spent_minutes / config.time_saturation_minutes * 100, 100
    )
    notes_score = min(metrics.notes_count / config.notes_saturation * 100, 100)
    confidence_span = config.max_confidence - config.min_confidence
    confidence_score = (confidence - config.min_confidence) / confidence_span * 100
    quiz_score = metrics.quiz_avg_score

    weights = config.weights
    weighted = (
        time_score * weights.time
        + notes_score * weights.notes
        + confidence_score * weights.confidence
        + quiz_score * weights.quiz
    )

    score = max(0, min(100, round_half_up(weighted)))
    return StrengthResult(score=score, label=strength_label(score, config))
