"""
Streak Motivation Messages

Generates the short encouraging message shown next to a learner's streak.
The message is personalised by streak length, upcoming exam and name. It
never fails: if no LLM is configured or the call errors, a canned message
is returned instead.

Usage:
    from examprep.services.learning.motivation import MotivationService

    service = MotivationService()
    message = await service.generate_message(
        StreakContext(current_streak=5, longest_streak=9, exam_name="JEE Main")
    )
"""

import logging
import random
from typing import Optional

from examprep.config.scoring import StreakConfig, streak_config
from examprep.models.streak import StreakContext
from examprep.services.llm.client import LLMClient, build_messages, get_llm_client
from examprep.services.llm.prompts import (
    FALLBACK_MESSAGES,
    SYSTEM_PROMPT,
    build_motivation_prompt,
)

logger = logging.getLogger(__name__)


class MotivationService:
    """Produces streak messages, falling back to canned text on any failure."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        config: StreakConfig = streak_config,
    ):
        self._llm_client = llm_client
        self.config = config

    @property
    def llm_client(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @staticmethod
    def fallback_message() -> str:
        return random.choice(FALLBACK_MESSAGES)

    async def generate_message(self, context: StreakContext) -> str:
        """
        Generate a motivational message for the given streak state.

        Args:
            context: Streak lengths plus optional exam and name details.

        Returns:
            A non-empty message. Never raises.
        """
        client = self.llm_client
        if not client.is_configured:
            return self.fallback_message()

        prompt = build_motivation_prompt(context, self.config.exam_urgency_days)
        try:
            text = await client.complete(
                messages=build_messages(prompt, system_prompt=SYSTEM_PROMPT),
                temperature=0.8,
                max_tokens=150,
            )
        except Exception as e:
            logger.warning(f"Motivation message generation failed, using fallback: {e}")
            return self.fallback_message()

        return (text or "").strip() or self.fallback_message()
