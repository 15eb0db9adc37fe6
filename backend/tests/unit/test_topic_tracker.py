"""
Unit tests for TopicProgressService.

Tests the topic tracking service including:
- Time, note and confidence events on new and existing topics
- Derived score kept in step with every mutation
- Input validation before any store access
- Store failures rolled back and reported
- Progress listing and strength grouping
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from examprep.db.models import TopicProgress
from examprep.enums.learning import StrengthLabel
from examprep.middleware.error_handling import StoreUnavailableError, ValidationError
from examprep.services.learning.topic_tracker import TopicProgressService

from tests.conftest import make_topic


@pytest.fixture
def service(mock_db):
    """Create a TopicProgressService instance with mock db."""
    return TopicProgressService(mock_db)


def _scalars_result(records: list) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = records
    return result


# ============================================================================
# Time Tracking
# ============================================================================


class TestTrackTimeSpent:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("minutes", [0, -1, -30])
    async def test_rejects_non_positive_minutes(self, service, mock_db, minutes):
        with pytest.raises(ValidationError):
            await service.track_time_spent("user-1", "Physics", "Kinematics", minutes)

        mock_db.execute.assert_not_awaited()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_creates_record_on_first_event(self, service, mock_db):
        with patch.object(service, "_get_topic", AsyncMock(return_value=None)) as get:
            result = await service.track_time_spent(
                "user-1", "Physics", "Kinematics", 30
            )

        get.assert_awaited_once_with("user-1", "physics_kinematics")
        assert len(mock_db.added) == 1
        record = mock_db.added[0]
        assert isinstance(record, TopicProgress)
        assert record.topic_key == "physics_kinematics"
        assert record.time_spent_minutes == 30
        assert record.last_studied is not None
        # 30/120 time at 0.30 plus neutral confidence at 0.35
        assert record.strength_score == 25
        assert record.strength_label == StrengthLabel.WEAK.value

        assert result.time_spent_minutes == 30
        assert result.strength_score == 25
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_accumulates_on_existing_record(self, service, mock_db):
        record = make_topic(time_spent_minutes=100, strength_score=43)

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            result = await service.track_time_spent(
                "user-1", "Physics", "Kinematics", 30
            )

        assert mock_db.added == []
        assert record.time_spent_minutes == 130
        assert result.time_spent_minutes == 130
        # Time is capped at 120 minutes: 30 + 17.5 -> 48
        assert result.strength_score == 48
        assert record.strength_score == 48
        assert record.strength_label == StrengthLabel.MEDIUM.value

    @pytest.mark.asyncio
    async def test_sequential_events_sum(self, service, mock_db):
        """Repeated events against the same record add up."""
        record = make_topic()

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            for minutes in (10, 20, 15):
                await service.track_time_spent("user-1", "Physics", "Kinematics", minutes)

        assert record.time_spent_minutes == 45
        assert mock_db.commit.await_count == 3

    @pytest.mark.asyncio
    async def test_two_half_hours_make_an_hour(self, service, mock_db):
        record = make_topic()

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            await service.track_time_spent("user-1", "Physics", "Kinematics", 30)
            result = await service.track_time_spent("user-1", "Physics", "Kinematics", 30)

        assert result.time_spent_minutes == 60

    @pytest.mark.asyncio
    async def test_read_failure_rolls_back(self, service, mock_db):
        mock_db.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection refused")
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            await service.track_time_spent("user-1", "Physics", "Kinematics", 30)

        assert exc_info.value.status_code == 503
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, service, mock_db):
        mock_db.commit.side_effect = OperationalError(
            "UPDATE", {}, Exception("server closed the connection")
        )
        record = make_topic()

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            with pytest.raises(StoreUnavailableError):
                await service.track_time_spent("user-1", "Physics", "Kinematics", 30)

        mock_db.rollback.assert_awaited_once()


# ============================================================================
# Notes
# ============================================================================


class TestTrackNoteSaved:
    @pytest.mark.asyncio
    async def test_increments_note_count(self, service, mock_db):
        record = make_topic(notes_count=4)

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            result = await service.track_note_saved("user-1", "Physics", "Kinematics")

        assert record.notes_count == 5
        assert record.last_note_saved is not None
        assert result.notes_count == 5
        # Notes maxed at 0.25 plus neutral confidence: 42.5 -> 43
        assert result.strength_score == 43
        assert record.strength_label == StrengthLabel.MEDIUM.value

    @pytest.mark.asyncio
    async def test_first_note_creates_record(self, service, mock_db):
        with patch.object(service, "_get_topic", AsyncMock(return_value=None)):
            result = await service.track_note_saved("user-1", "Chemistry", "Mole Concept")

        record = mock_db.added[0]
        assert record.topic_key == "chemistry_mole_concept"
        assert record.notes_count == 1
        assert record.time_spent_minutes == 0
        assert result.notes_count == 1
        assert result.strength_score == 23

    @pytest.mark.asyncio
    async def test_apply_leaves_commit_to_caller(self, service, mock_db):
        record = make_topic(notes_count=1)

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            applied = await service.apply_note_saved("user-1", "Physics", "Kinematics")

        assert applied is record
        assert record.notes_count == 2
        assert record.strength_score is not None
        mock_db.commit.assert_not_awaited()


# ============================================================================
# Confidence
# ============================================================================


class TestUpdateConfidence:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "requested,stored", [(9, 5), (5, 5), (3, 3), (0, 1), (-2, 1)]
    )
    async def test_clamps_and_returns_stored_value(
        self, service, mock_db, requested, stored
    ):
        record = make_topic(confidence=2)

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            result = await service.update_confidence(
                "user-1", "Physics", "Kinematics", requested
            )

        assert record.confidence == stored
        assert result.confidence == stored

    @pytest.mark.asyncio
    async def test_overwrites_and_rescores(self, service, mock_db):
        record = make_topic(time_spent_minutes=120, notes_count=5, confidence=1)

        with patch.object(service, "_get_topic", AsyncMock(return_value=record)):
            result = await service.update_confidence(
                "user-1", "Physics", "Kinematics", 5
            )

        assert result.strength_score == 90
        assert result.strength_label == StrengthLabel.STRONG
        assert record.strength_label == StrengthLabel.STRONG.value


class TestNewTopicScenario:
    @pytest.mark.asyncio
    async def test_time_then_confidence(self, service, mock_db):
        """60 minutes then confidence 2: 50*0.30 + 25*0.35 = 23.75 -> 24, weak."""

        def stored_topic(user_id, topic_key):
            return mock_db.added[0] if mock_db.added else None

        with patch.object(service, "_get_topic", side_effect=stored_topic):
            await service.track_time_spent("user-1", "Physics", "Kinematics", 60)
            result = await service.update_confidence(
                "user-1", "Physics", "Kinematics", 2
            )

        assert len(mock_db.added) == 1
        record = mock_db.added[0]
        assert record.topic_key == "physics_kinematics"
        assert record.time_spent_minutes == 60
        assert record.confidence == 2
        assert result.strength_score == 24
        assert result.strength_label == StrengthLabel.WEAK


# ============================================================================
# Progress Listing
# ============================================================================


class TestGetTopicProgress:
    @pytest.mark.asyncio
    async def test_groups_by_label(self, service, mock_db):
        records = [
            make_topic(topic="Kinematics", strength_score=80, strength_label="strong"),
            make_topic(topic="Optics", strength_score=50, strength_label="medium"),
            make_topic(topic="Waves", strength_score=20, strength_label="weak"),
            make_topic(topic="Thermodynamics"),
        ]
        mock_db.execute.return_value = _scalars_result(records)

        response = await service.get_topic_progress("user-1")

        assert [t.topic for t in response.topics] == [
            "Kinematics",
            "Optics",
            "Waves",
            "Thermodynamics",
        ]
        assert response.topics[0].id == "physics_kinematics"
        assert [t.topic for t in response.grouped.strong] == ["Kinematics"]
        assert [t.topic for t in response.grouped.medium] == ["Optics"]
        # Unlabelled topics are grouped as weak
        assert [t.topic for t in response.grouped.weak] == ["Waves", "Thermodynamics"]
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty(self, service, mock_db):
        mock_db.execute.return_value = _scalars_result([])

        response = await service.get_topic_progress("user-1", subject="Biology")

        assert response.success is True
        assert response.topics == []
        assert response.grouped.weak == []

    @pytest.mark.asyncio
    async def test_serialises_camel_case(self, service, mock_db):
        mock_db.execute.return_value = _scalars_result(
            [make_topic(time_spent_minutes=30, strength_score=25, strength_label="weak")]
        )

        response = await service.get_topic_progress("user-1")
        payload = response.model_dump(by_alias=True, mode="json")

        topic = payload["topics"][0]
        assert topic["id"] == "physics_kinematics"
        assert topic["timeSpentMinutes"] == 30
        assert topic["strengthLabel"] == "weak"
