"""
LLM Services

Provides the LiteLLM-backed client, prompt builders and output parsing.

Usage:
    from examprep.services.llm import get_llm_client, build_messages, SYSTEM_PROMPT

    client = get_llm_client()
    text = await client.complete(build_messages(prompt, system_prompt=SYSTEM_PROMPT))
"""

from examprep.services.llm.client import (
    LLMClient,
    build_messages,
    get_llm_client,
    reset_llm_client,
)
from examprep.services.llm.parsing import parse_model_output, parse_string_list
from examprep.services.llm.prompts import SYSTEM_PROMPT

__all__ = [
    "LLMClient",
    "build_messages",
    "get_llm_client",
    "reset_llm_client",
    "parse_model_output",
    "parse_string_list",
    "SYSTEM_PROMPT",
]
