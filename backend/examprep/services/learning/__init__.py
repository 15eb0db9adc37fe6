"""
Learning Services

Services for topic mastery tracking, study recommendations and daily
study streaks.

Modules:
- strength: Pure strength scoring (metrics -> score + label)
- topic_tracker: Time/note/confidence events per topic
- recommendations: Priority-ordered "study next" suggestions
- streak_tracking: Daily streak counter with history
- motivation: LLM-generated streak messages with canned fallbacks

Usage:
    from examprep.services.learning import (
        TopicProgressService,
        RecommendationService,
        StreakTrackingService,
        compute_strength,
    )
"""

from examprep.services.learning.strength import (
    clamp_confidence,
    compute_strength,
    normalize_topic_key,
    round_half_up,
    strength_label,
)
from examprep.services.learning.topic_tracker import TopicProgressService
from examprep.services.learning.recommendations import RecommendationService
from examprep.services.learning.motivation import MotivationService
from examprep.services.learning.streak_tracking import StreakTrackingService

__all__ = [
    # Scoring
    "clamp_confidence",
    "compute_strength",
    "normalize_topic_key",
    "round_half_up",
    "strength_label",
    # Services
    "TopicProgressService",
    "RecommendationService",
    "MotivationService",
    "StreakTrackingService",
]
