"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from examprep.config import settings

    # Access settings
    db_url = settings.POSTGRES_URL
    model = settings.TEXT_MODEL
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings

from examprep.enums.api import RateLimitType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Exam Prep Companion"
    DEBUG: bool = False

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "examprep"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "examprep"

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # LLM providers (LiteLLM reads the matching *_API_KEY from the environment)
    GEMINI_API_KEY: str = ""
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""

    # Text model for explanations, study plans and streak messages.
    # Format: provider/model-name
    TEXT_MODEL: str = "gemini/gemini-2.0-flash"

    # Streaks are counted in calendar days of this timezone
    STREAK_TIMEZONE: str = "UTC"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Rate limiting (SlowAPI format)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_LLM_HEAVY: str = "10/minute"
    RATE_LIMIT_TRACKING: str = "60/minute"

    def get_rate_limit(self, rate_limit_type: RateLimitType) -> str:
        """Return the configured rate limit string for an endpoint category."""
        limits = {
            RateLimitType.DEFAULT: self.RATE_LIMIT_DEFAULT,
            RateLimitType.LLM_HEAVY: self.RATE_LIMIT_LLM_HEAVY,
            RateLimitType.TRACKING: self.RATE_LIMIT_TRACKING,
        }
        return limits.get(rate_limit_type, self.RATE_LIMIT_DEFAULT)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
