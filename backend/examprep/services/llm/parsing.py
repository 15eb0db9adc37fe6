"""
Model output parsing.

LLMs asked for JSON often wrap it in prose or markdown fences. The parser
tries the whole text first, then the outermost {...} block, and otherwise
hands the text back untouched as RawContent.

Suggestion prompts ask for a JSON array of strings instead. When no array
can be recovered, the items are pulled out of the text line by line.
"""

import json
import logging
import re
from typing import Any, Optional

from examprep.models.study import ParsedContent, RawContent, StructuredContent

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

# Numbering, bullets and stray quotes in front of a listed item
_ITEM_PREFIX = re.compile(r'^[\d.\-*\s"]+')

MIN_QUESTION_LENGTH = 10


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def _loads_object(text: str) -> Optional[dict]:
    data = _loads(text)
    return data if isinstance(data, dict) else None


def parse_model_output(text: Optional[str]) -> ParsedContent:
    """
    Parse free-form model output into structured or raw content.

    Args:
        text: Raw completion text (None is treated as empty).

    Returns:
        StructuredContent if a JSON object could be recovered, else RawContent.
    """
    text = text or ""

    data = _loads_object(text.strip())
    if data is None:
        match = _JSON_OBJECT.search(text)
        if match:
            data = _loads_object(match.group(0))

    if data is None:
        logger.debug("Model output is not JSON, keeping raw text")
        return RawContent(text=text)

    return StructuredContent(data=data)


def parse_string_list(text: Optional[str]) -> Optional[list[str]]:
    """
    Recover a JSON array of strings from model output.

    Returns:
        The non-empty items as strings, or None when no array was found.
    """
    text = text or ""

    data = _loads(text.strip())
    if not isinstance(data, list):
        match = _JSON_ARRAY.search(text)
        data = _loads(match.group(0)) if match else None

    if not isinstance(data, list):
        return None

    items = [str(item).strip() for item in data if item is not None]
    return [item for item in items if item]


def extract_questions(text: Optional[str]) -> list[str]:
    """Questions listed one per line in non-JSON output."""
    questions = []
    for line in (text or "").splitlines():
        if len(line.strip()) <= MIN_QUESTION_LENGTH or "?" not in line:
            continue
        question = _ITEM_PREFIX.sub("", line).rstrip().rstrip('"').strip()
        if question:
            questions.append(question)
    return questions


def extract_topics(text: Optional[str]) -> list[str]:
    """Short topic names listed one per line in non-JSON output."""
    topics = []
    for line in (text or "").splitlines():
        if not 3 < len(line.strip()) < 50:
            continue
        topic = re.sub(r"[\"',]", "", _ITEM_PREFIX.sub("", line)).strip()
        if len(topic) > 3:
            topics.append(topic)
    return topics
