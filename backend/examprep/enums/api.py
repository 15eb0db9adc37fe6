"""
API-related enums.

Defines enums for rate limiting and other API concerns.
"""

from enum import Enum


class RateLimitType(str, Enum):
    """
    Rate limit categories for different endpoint types.

    Each category has a corresponding rate limit configured in settings.
    Usage:
        from examprep.enums import RateLimitType
        from examprep.config import settings

        limit = settings.get_rate_limit(RateLimitType.LLM_HEAVY)
    """

    # General API endpoints
    DEFAULT = "default"

    # Endpoints that call LLMs (expensive)
    LLM_HEAVY = "llm_heavy"

    # Progress and streak tracking writes
    TRACKING = "tracking"
