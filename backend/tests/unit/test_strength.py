"""
Unit tests for topic strength scoring.

Tests for:
- Weighted score computation and half-up rounding
- Saturation of time and notes contributions
- Label thresholds
- Topic key normalisation and confidence clamping
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from examprep.config.scoring import ScoringConfig, ScoringWeights
from examprep.enums.learning import StrengthLabel
from examprep.models.progress import TopicMetrics
from examprep.services.learning.strength import (
    clamp_confidence,
    compute_strength,
    normalize_topic_key,
    round_half_up,
    strength_label,
)


# =============================================================================
# compute_strength
# =============================================================================


class TestComputeStrength:
    """Tests for the weighted strength score."""

    @pytest.mark.parametrize(
        "metrics,expected_score,expected_label",
        [
            pytest.param(TopicMetrics(), 18, StrengthLabel.WEAK, id="fresh_topic"),
            pytest.param(
                TopicMetrics(time_spent_minutes=60, notes_count=2),
                43,
                StrengthLabel.MEDIUM,
                id="half_time_two_notes",
            ),
            pytest.param(
                TopicMetrics(
                    time_spent_minutes=120,
                    notes_count=5,
                    confidence=5,
                    quiz_avg_score=100,
                ),
                100,
                StrengthLabel.STRONG,
                id="everything_maxed",
            ),
            pytest.param(
                TopicMetrics(confidence=1), 0, StrengthLabel.WEAK, id="lowest_confidence"
            ),
            pytest.param(
                TopicMetrics(time_spent_minutes=120, notes_count=5, confidence=3),
                73,
                StrengthLabel.STRONG,
                id="maxed_time_notes_neutral_confidence",
            ),
            pytest.param(
                TopicMetrics(time_spent_minutes=30, confidence=4, quiz_avg_score=80),
                42,
                StrengthLabel.MEDIUM,
                id="mixed",
            ),
        ],
    )
    def test_known_values(
        self,
        metrics: TopicMetrics,
        expected_score: int,
        expected_label: StrengthLabel,
    ) -> None:
        result = compute_strength(metrics)

        assert result.score == expected_score
        assert result.label == expected_label

    def test_deterministic(self) -> None:
        metrics = TopicMetrics(
            time_spent_minutes=75, notes_count=3, confidence=4, quiz_avg_score=66.5
        )

        results = {compute_strength(metrics) for _ in range(50)}

        assert len(results) == 1

    def test_missing_confidence_counts_as_neutral(self) -> None:
        """A never-rated topic scores the same as one rated 3."""
        unrated = compute_strength(TopicMetrics(time_spent_minutes=45, notes_count=1))
        neutral = compute_strength(
            TopicMetrics(time_spent_minutes=45, notes_count=1, confidence=3)
        )

        assert unrated == neutral

    def test_time_saturates_at_120_minutes(self) -> None:
        at_cap = compute_strength(TopicMetrics(time_spent_minutes=120))
        far_beyond = compute_strength(TopicMetrics(time_spent_minutes=5000))

        assert at_cap.score == far_beyond.score

    def test_notes_saturate_at_five(self) -> None:
        at_cap = compute_strength(TopicMetrics(notes_count=5))
        far_beyond = compute_strength(TopicMetrics(notes_count=80))

        assert at_cap.score == far_beyond.score

    @pytest.mark.parametrize("minutes", [0, 10, 45, 90, 119, 120, 400])
    @pytest.mark.parametrize("notes", [0, 1, 3, 5, 9])
    @pytest.mark.parametrize("confidence", [None, 1, 2, 3, 4, 5])
    def test_score_stays_in_range_and_matches_label(
        self, minutes: int, notes: int, confidence
    ) -> None:
        result = compute_strength(
            TopicMetrics(
                time_spent_minutes=minutes, notes_count=notes, confidence=confidence
            )
        )

        assert 0 <= result.score <= 100
        assert result.label == strength_label(result.score)

    @pytest.mark.parametrize("field", ["time_spent_minutes", "notes_count"])
    def test_monotonic_in_counters(self, field: str) -> None:
        """More study never lowers the score."""
        scores = [
            compute_strength(TopicMetrics(**{field: value})).score
            for value in range(0, 200, 7)
        ]

        assert scores == sorted(scores)

    def test_monotonic_in_confidence(self) -> None:
        scores = [
            compute_strength(TopicMetrics(confidence=c)).score for c in range(1, 6)
        ]

        assert scores == sorted(scores)
        assert scores[0] < scores[-1]

    def test_custom_weights_are_respected(self) -> None:
        config = ScoringConfig(
            weights=ScoringWeights(time=1.0, notes=0.0, confidence=0.0, quiz=0.0)
        )

        result = compute_strength(TopicMetrics(time_spent_minutes=60), config)

        assert result.score == 50
        assert result.label == StrengthLabel.MEDIUM


# =============================================================================
# Labels & Helpers
# =============================================================================


class TestStrengthLabel:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (100, StrengthLabel.STRONG),
            (70, StrengthLabel.STRONG),
            (69, StrengthLabel.MEDIUM),
            (40, StrengthLabel.MEDIUM),
            (39, StrengthLabel.WEAK),
            (0, StrengthLabel.WEAK),
        ],
    )
    def test_thresholds(self, score: int, expected: StrengthLabel) -> None:
        assert strength_label(score) == expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected",
        [(42.5, 43), (17.5, 18), (2.5, 3), (42.49, 42), (0.0, 0), (99.5, 100)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestNormalizeTopicKey:
    @pytest.mark.parametrize(
        "subject,topic,expected",
        [
            ("Physics", "Kinematics", "physics_kinematics"),
            ("Physics", "Rotational  Motion", "physics_rotational_motion"),
            ("Organic Chemistry", "Alkanes\tand\nAlkenes", "organic_chemistry_alkanes_and_alkenes"),
            ("MATHS", "Limits", "maths_limits"),
        ],
    )
    def test_normalisation(self, subject: str, topic: str, expected: str) -> None:
        assert normalize_topic_key(subject, topic) == expected

    def test_same_topic_different_case_shares_key(self) -> None:
        assert normalize_topic_key("Physics", "Optics") == normalize_topic_key(
            "physics", "OPTICS"
        )


class TestClampConfidence:
    @pytest.mark.parametrize(
        "value,expected", [(-4, 1), (0, 1), (1, 1), (3, 3), (5, 5), (7, 5), (100, 5)]
    )
    def test_clamps_into_range(self, value: int, expected: int) -> None:
        assert clamp_confidence(value) == expected


class TestScoringConfig:
    def test_weights_must_sum_to_one(self) -> None:
        with pytest.raises(PydanticValidationError):
            ScoringWeights(time=0.5, notes=0.25, confidence=0.35, quiz=0.10)

    def test_config_is_immutable(self) -> None:
        config = ScoringConfig()

        with pytest.raises(PydanticValidationError):
            config.strong_threshold = 50
