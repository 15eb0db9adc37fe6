"""Configuration package."""

from examprep.config.settings import (
    Settings,
    get_settings,
    load_yaml_config,
    settings,
    yaml_config,
)
from examprep.config.log_setup import setup_logging
from examprep.config.scoring import (
    RecommendationPolicy,
    RecommendationRule,
    ScoringConfig,
    ScoringWeights,
    StreakConfig,
    recommendation_policy,
    scoring_config,
    streak_config,
)

__all__ = [
    # Application settings
    "Settings",
    "get_settings",
    "load_yaml_config",
    "settings",
    "yaml_config",
    "setup_logging",
    # Scoring / streak configuration
    "RecommendationPolicy",
    "RecommendationRule",
    "ScoringConfig",
    "ScoringWeights",
    "StreakConfig",
    "recommendation_policy",
    "scoring_config",
    "streak_config",
]
