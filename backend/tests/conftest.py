"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across unit tests.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root before settings are imported
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Settings are read at import time, so the test environment has to be in
# place before any examprep module is imported. These override .env values.
os.environ.update(
    {
        "POSTGRES_HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "POSTGRES_USER": os.environ.get("POSTGRES_TEST_USER", "testuser"),
        "POSTGRES_PASSWORD": os.environ.get("POSTGRES_TEST_PASSWORD", "testpass"),
        "POSTGRES_DB": os.environ.get("POSTGRES_TEST_DB", "testdb"),
        "GEMINI_API_KEY": "",
        "OPENAI_API_KEY": "",
        "ANTHROPIC_API_KEY": "",
        "STREAK_TIMEZONE": "UTC",
        "RATE_LIMIT_ENABLED": "false",
        "DEBUG": "false",
    }
)

from examprep.db.models import StreakRecord, TopicProgress, UserProfile  # noqa: E402


# ============================================================================
# Mock Database Session
# ============================================================================


@pytest.fixture
def mock_db() -> MagicMock:
    """
    Create a mock database session for unit testing.

    Objects passed to add() are collected in mock.added so tests can inspect
    what a service created.
    """
    mock = MagicMock()
    mock.added = []
    mock.add = MagicMock(side_effect=mock.added.append)
    mock.execute = AsyncMock()
    mock.flush = AsyncMock()
    mock.commit = AsyncMock()
    mock.rollback = AsyncMock()
    mock.close = AsyncMock()
    return mock


# ============================================================================
# Record Factories
# ============================================================================


def make_topic(
    subject: str = "Physics",
    topic: str = "Kinematics",
    user_id: str = "user-1",
    **fields: Any,
) -> TopicProgress:
    """Build a detached TopicProgress with zeroed metrics."""
    now = datetime.now(timezone.utc)
    values: dict[str, Any] = {
        "user_id": user_id,
        "topic_key": f"{subject}_{topic}".replace(" ", "_").lower(),
        "subject": subject,
        "topic": topic,
        "time_spent_minutes": 0,
        "notes_count": 0,
        "confidence": None,
        "quiz_avg_score": 0.0,
        "strength_score": None,
        "strength_label": None,
        "created_at": now,
        "updated_at": now,
    }
    values.update(fields)
    return TopicProgress(**values)


def make_streak(
    last_active_date,
    current_streak: int = 1,
    longest_streak: Optional[int] = None,
    history: Optional[list[dict]] = None,
    message: str = "Keep going!",
    user_id: str = "user-1",
) -> StreakRecord:
    """Build a detached StreakRecord."""
    return StreakRecord(
        user_id=user_id,
        current_streak=current_streak,
        longest_streak=current_streak if longest_streak is None else longest_streak,
        last_active_date=last_active_date,
        today_message=message,
        streak_history=history if history is not None else [],
    )


def make_profile(user_id: str = "user-1", **fields: Any) -> UserProfile:
    """Build a detached UserProfile."""
    values: dict[str, Any] = {
        "user_id": user_id,
        "current_streak": 0,
        "longest_streak": 0,
    }
    values.update(fields)
    return UserProfile(**values)


@pytest.fixture
def topic_factory():
    return make_topic


@pytest.fixture
def streak_factory():
    return make_streak


@pytest.fixture
def profile_factory():
    return make_profile
