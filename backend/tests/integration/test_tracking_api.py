"""
Integration Tests for the Tracking, Streak and Notes API Endpoints.

Requests go through the full app with get_db pointed at the test database.

Tests for:
- /api/track/time - cumulative minutes and the streak update
- /api/track/progress/{user_id} - stored topic records
- /api/streak/{user_id} - streak view after tracking
- /api/notes - saving and listing notes
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from examprep.main import app
from examprep.middleware.error_handling import StoreUnavailableError
from examprep.routers import tracking_router

pytestmark = pytest.mark.integration


def _time_payload(minutes: int = 30) -> dict:
    return {
        "userId": "u1",
        "subject": "Physics",
        "topic": "Kinematics",
        "minutes": minutes,
    }


class TestTrackTimeAPI:
    @pytest.mark.asyncio
    async def test_track_time_twice(self, async_test_client: AsyncClient):
        first = await async_test_client.post("/api/track/time", json=_time_payload())
        second = await async_test_client.post("/api/track/time", json=_time_payload())

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["timeSpentMinutes"] == 60

        progress = await async_test_client.get("/api/track/progress/u1")
        topics = progress.json()["topics"]
        assert len(topics) == 1
        assert topics[0]["id"] == "physics_kinematics"
        assert topics[0]["timeSpentMinutes"] == 60

        streak = await async_test_client.get("/api/streak/u1")
        assert streak.json()["currentStreak"] == 1
        assert streak.json()["studiedToday"] is True

    @pytest.mark.asyncio
    async def test_streak_failure_keeps_tracked_time(
        self, async_test_client: AsyncClient
    ):
        streak_service = MagicMock()
        streak_service.update_streak = AsyncMock(
            side_effect=StoreUnavailableError("Update streak failed")
        )
        app.dependency_overrides[tracking_router.get_streak_service] = (
            lambda: streak_service
        )
        try:
            response = await async_test_client.post(
                "/api/track/time", json=_time_payload(45)
            )
        finally:
            app.dependency_overrides.pop(tracking_router.get_streak_service, None)

        assert response.status_code == 200
        assert response.json()["timeSpentMinutes"] == 45

        progress = await async_test_client.get("/api/track/progress/u1")
        assert progress.json()["topics"][0]["timeSpentMinutes"] == 45

    @pytest.mark.asyncio
    async def test_rejects_non_positive_minutes(self, async_test_client: AsyncClient):
        response = await async_test_client.post(
            "/api/track/time", json=_time_payload(0)
        )

        assert response.status_code == 422

        progress = await async_test_client.get("/api/track/progress/u1")
        assert progress.json()["topics"] == []


class TestNotesAPI:
    @pytest.mark.asyncio
    async def test_save_and_list(self, async_test_client: AsyncClient):
        saved = await async_test_client.post(
            "/api/notes",
            json={
                "userId": "u1",
                "subject": "Physics",
                "topic": "Optics",
                "content": "Snell's law: n1 sin a = n2 sin b",
                "tags": ["formula"],
            },
        )

        assert saved.status_code == 200
        assert saved.json()["notesCount"] == 1

        listed = await async_test_client.get("/api/notes/u1")
        notes = listed.json()["notes"]
        assert [n["id"] for n in notes] == [saved.json()["noteId"]]
        assert notes[0]["tags"] == ["formula"]

        progress = await async_test_client.get("/api/track/progress/u1")
        assert progress.json()["topics"][0]["notesCount"] == 1
