"""
Unit tests for streak motivation messages and their prompt.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from examprep.models.streak import StreakContext
from examprep.services.learning.motivation import MotivationService
from examprep.services.llm.prompts import (
    FALLBACK_MESSAGES,
    build_motivation_prompt,
    streak_situation,
)


def _client(configured: bool = True, **complete_kwargs) -> MagicMock:
    client = MagicMock()
    client.is_configured = configured
    client.complete = AsyncMock(**complete_kwargs)
    return client


CONTEXT = StreakContext(current_streak=5, longest_streak=9, exam_name="NEET")


class TestGenerateMessage:
    @pytest.mark.asyncio
    async def test_returns_model_text_stripped(self):
        client = _client(return_value="  🔥 Five days strong, keep it up!\n")
        service = MotivationService(llm_client=client)

        message = await service.generate_message(CONTEXT)

        assert message == "🔥 Five days strong, keep it up!"
        kwargs = client.complete.await_args.kwargs
        assert kwargs["temperature"] == 0.8
        assert kwargs["max_tokens"] == 150
        assert kwargs["messages"][0]["role"] == "system"
        assert "NEET" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_unconfigured_uses_fallback_without_calling(self):
        client = _client(configured=False)
        service = MotivationService(llm_client=client)

        message = await service.generate_message(CONTEXT)

        assert message in FALLBACK_MESSAGES
        client.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self):
        client = _client(side_effect=RuntimeError("quota exceeded"))
        service = MotivationService(llm_client=client)

        message = await service.generate_message(CONTEXT)

        assert message in FALLBACK_MESSAGES

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n", None])
    async def test_empty_output_uses_fallback(self, text):
        service = MotivationService(llm_client=_client(return_value=text))

        message = await service.generate_message(CONTEXT)

        assert message in FALLBACK_MESSAGES

    def test_fallback_is_one_of_the_canned_messages(self):
        assert all(
            MotivationService.fallback_message() in FALLBACK_MESSAGES for _ in range(20)
        )


class TestMotivationPrompt:
    @pytest.mark.parametrize(
        "streak,fragment",
        [
            (0, "missed yesterday"),
            (1, "just started"),
            (6, "6-day streak. Encourage consistency"),
            (7, "Amazing 7-day streak"),
            (29, "Amazing 29-day streak"),
            (30, "Incredible 30-day streak"),
        ],
    )
    def test_situation_buckets(self, streak, fragment):
        assert fragment in streak_situation(streak)

    @pytest.mark.parametrize("days,urgent", [(0, False), (1, True), (29, True), (30, False), (-3, False)])
    def test_urgency_window(self, days, urgent):
        context = StreakContext(current_streak=3, longest_streak=3, days_to_exam=days)

        prompt = build_motivation_prompt(context, urgency_days=30)

        assert ("add urgency" in prompt) is urgent

    def test_defaults_without_profile_details(self):
        prompt = build_motivation_prompt(StreakContext(current_streak=2, longest_streak=4))

        assert "competitive exams" in prompt
        assert "Student name" not in prompt
        assert "Current streak: 2 days" in prompt
        assert "Longest streak: 4 days" in prompt

    def test_includes_name(self):
        context = StreakContext(current_streak=2, longest_streak=4, user_name="Ravi")

        assert "Student name: Ravi" in build_motivation_prompt(context)
