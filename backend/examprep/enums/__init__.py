"""
Centralized enum definitions for the application.

All enums are organized by domain:
- learning.py: Strength labels, recommendation priorities, study content types,
  learning room tags
- api.py: Rate limit categories

Usage:
    from examprep.enums import StrengthLabel, RateLimitType

    # Or import from specific module
    from examprep.enums.learning import StrengthLabel
"""

from examprep.enums.api import RateLimitType
from examprep.enums.learning import (
    LearningTag,
    RecommendationPriority,
    StrengthLabel,
    StudyContentType,
    StudyPlanStatus,
)

__all__ = [
    # API
    "RateLimitType",
    # Learning
    "LearningTag",
    "RecommendationPriority",
    "StrengthLabel",
    "StudyContentType",
    "StudyPlanStatus",
]
