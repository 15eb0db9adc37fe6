"""
Unit tests for RecommendationService.

Tests for:
- Priority ordering (weak -> medium -> strong) with stable insertion order
- Reason and suggested time per strength bucket
- Summary counts and the empty case
"""

from unittest.mock import MagicMock

import pytest

from examprep.config.scoring import RecommendationPolicy, RecommendationRule
from examprep.enums.learning import RecommendationPriority
from examprep.services.learning.recommendations import RecommendationService

from tests.conftest import make_topic


@pytest.fixture
def service(mock_db):
    return RecommendationService(mock_db)


def _with_records(mock_db, records: list) -> None:
    result = MagicMock()
    result.scalars.return_value.all.return_value = records
    mock_db.execute.return_value = result


class TestGetRecommendations:
    @pytest.mark.asyncio
    async def test_empty(self, service, mock_db):
        _with_records(mock_db, [])

        response = await service.get_recommendations("user-1")

        assert response.recommendations == []
        assert response.summary.total == 0
        assert response.summary.weak == 0
        assert response.message == "No topics tracked yet"

    @pytest.mark.asyncio
    async def test_orders_by_priority_keeping_insertion_order(self, service, mock_db):
        _with_records(
            mock_db,
            [
                make_topic(topic="Optics", strength_score=82, strength_label="strong"),
                make_topic(topic="Waves", strength_score=25, strength_label="weak"),
                make_topic(topic="Heat", strength_score=55, strength_label="medium"),
                make_topic(topic="Gravitation", strength_score=12, strength_label="weak"),
                make_topic(topic="Kinematics", strength_score=71, strength_label="strong"),
            ],
        )

        response = await service.get_recommendations("user-1")

        assert [r.topic for r in response.recommendations] == [
            "Waves",
            "Gravitation",
            "Heat",
            "Optics",
            "Kinematics",
        ]
        priorities = [r.priority for r in response.recommendations]
        assert priorities == [
            RecommendationPriority.HIGH,
            RecommendationPriority.HIGH,
            RecommendationPriority.MEDIUM,
            RecommendationPriority.LOW,
            RecommendationPriority.LOW,
        ]
        assert [p.rank for p in priorities] == sorted(p.rank for p in priorities)

    @pytest.mark.asyncio
    async def test_bucket_details(self, service, mock_db):
        _with_records(
            mock_db,
            [
                make_topic(topic="Waves", strength_score=25, strength_label="weak"),
                make_topic(topic="Heat", strength_score=55, strength_label="medium"),
                make_topic(topic="Optics", strength_score=82, strength_label="strong"),
            ],
        )

        response = await service.get_recommendations("user-1")
        weak, medium, strong = response.recommendations

        assert (weak.reason, weak.suggested_time) == ("Needs more practice", 45)
        assert (medium.reason, medium.suggested_time) == (
            "Good progress, keep practicing",
            30,
        )
        assert (strong.reason, strong.suggested_time) == (
            "Quick revision recommended",
            15,
        )
        assert weak.subject == "Physics"
        assert weak.strength_score == 25

    @pytest.mark.asyncio
    async def test_unscored_topic_is_weak_with_zero_score(self, service, mock_db):
        _with_records(mock_db, [make_topic(topic="Fluids")])

        response = await service.get_recommendations("user-1")

        only = response.recommendations[0]
        assert only.priority == RecommendationPriority.HIGH
        assert only.strength_score == 0
        assert response.summary.weak == 1

    @pytest.mark.asyncio
    async def test_summary_counts(self, service, mock_db):
        _with_records(
            mock_db,
            [
                make_topic(topic="A", strength_score=10, strength_label="weak"),
                make_topic(topic="B", strength_score=45, strength_label="medium"),
                make_topic(topic="C", strength_score=90, strength_label="strong"),
                make_topic(topic="D", strength_score=95, strength_label="strong"),
            ],
        )

        response = await service.get_recommendations("user-1")

        summary = response.summary
        assert summary.total == 4
        assert (summary.weak, summary.medium, summary.strong) == (1, 1, 2)
        assert summary.total == summary.weak + summary.medium + summary.strong
        assert response.message is None

    @pytest.mark.asyncio
    async def test_custom_policy(self, mock_db):
        policy = RecommendationPolicy(
            weak=RecommendationRule(
                priority=RecommendationPriority.HIGH,
                reason="Revisit from scratch",
                suggested_time=60,
            )
        )
        _with_records(
            mock_db, [make_topic(topic="Waves", strength_score=5, strength_label="weak")]
        )

        response = await RecommendationService(mock_db, policy).get_recommendations(
            "user-1"
        )

        assert response.recommendations[0].reason == "Revisit from scratch"
        assert response.recommendations[0].suggested_time == 60

    @pytest.mark.asyncio
    async def test_serialises_camel_case(self, service, mock_db):
        _with_records(
            mock_db, [make_topic(topic="Waves", strength_score=5, strength_label="weak")]
        )

        response = await service.get_recommendations("user-1")
        payload = response.model_dump(by_alias=True, mode="json")

        assert payload["recommendations"][0]["suggestedTime"] == 45
        assert payload["recommendations"][0]["strengthScore"] == 5
        assert payload["summary"]["total"] == 1
