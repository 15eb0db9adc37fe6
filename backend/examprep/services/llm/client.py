"""
LLM Client via LiteLLM.

LiteLLM provides a unified interface to many LLM providers using
the format "provider/model-name" (e.g. "gemini/gemini-2.0-flash").
Key features used here:
- Single configured text model (settings.TEXT_MODEL)
- Automatic retries with exponential backoff
- Native async support

See: https://docs.litellm.ai/

Usage:
    from examprep.services.llm import build_messages, get_llm_client

    client = get_llm_client()
    if client.is_configured:
        text = await client.complete(
            messages=build_messages("Explain Ohm's law", system_prompt=SYSTEM_PROMPT),
            temperature=0.7,
        )
"""

import logging
import os
import time
from typing import Optional

import litellm
from litellm import acompletion
from tenacity import retry, stop_after_attempt, wait_exponential

from examprep.config.settings import settings

logger = logging.getLogger(__name__)

# Configure LiteLLM
litellm.drop_params = True  # Drop unsupported params instead of erroring
if settings.DEBUG:
    os.environ["LITELLM_LOG"] = "DEBUG"


def build_messages(
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[dict[str, str]]:
    """
    Build messages list from prompt and optional system prompt.

    Args:
        prompt: User prompt text
        system_prompt: Optional system prompt

    Returns:
        List of message dicts for LLM API
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


class LLMClient:
    """
    Thin async wrapper around LiteLLM completions.

    Every call goes to the configured TEXT_MODEL. Transient provider
    failures are retried up to three times with exponential backoff; the
    last error is re-raised to the caller, which decides whether it has a
    fallback.
    """

    def __init__(self, model: Optional[str] = None):
        """
        Initialize the LLM client and check which providers have keys.

        Args:
            model: Optional model override (defaults to settings.TEXT_MODEL)
        """
        self.model = model or settings.TEXT_MODEL
        self.providers = self._available_providers()

        if not self.providers:
            logger.warning(
                "No LLM API keys configured. Set at least one of: "
                "GEMINI_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY"
            )
        else:
            logger.info(f"LLM client initialized with providers: {self.providers}")

    @staticmethod
    def _available_providers() -> list[str]:
        available = []
        if os.getenv("GEMINI_API_KEY") or settings.GEMINI_API_KEY:
            available.append("Google/Gemini")
        if os.getenv("OPENAI_API_KEY") or settings.OPENAI_API_KEY:
            available.append("OpenAI")
        if os.getenv("ANTHROPIC_API_KEY") or settings.ANTHROPIC_API_KEY:
            available.append("Anthropic")
        return available

    @property
    def is_configured(self) -> bool:
        """Whether any provider key is available."""
        return bool(self.providers)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        reraise=True,
    )
    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> str:
        """
        Generate a completion.

        Args:
            messages: Chat messages in OpenAI format
                [{"role": "user", "content": "..."}, ...]
            temperature: Sampling temperature (0-1, lower = more deterministic)
            max_tokens: Maximum tokens in response

        Returns:
            The response text ("" if the provider returned no content).

        Raises:
            Exception: If completion fails after retries
        """
        start_time = time.perf_counter()

        try:
            response = await acompletion(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            logger.error(f"LLM completion failed: {e} (model={self.model})")
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(f"LLM completion [{self.model}] - Latency: {latency_ms}ms")

        return response.choices[0].message.content or ""


# Singleton instance
_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """
    Get or create the singleton LLM client.

    Returns:
        Shared LLMClient instance
    """
    global _client
    if _client is None:
        _client = LLMClient()
    return _client


def reset_llm_client() -> None:
    """Reset the singleton client (used by tests)."""
    global _client
    _client = None
