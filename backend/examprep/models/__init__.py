"""
Pydantic Models

API request/response schemas grouped by domain:
- base.py: Strict request/response bases with camelCase aliases
- progress.py: Topic tracking, strength scoring, recommendations
- streak.py: Daily study streaks
- study.py: Study content, study plans, notes and exam profile
"""

from examprep.models.base import StrictRequest, StrictResponse, SuccessResponse

__all__ = ["StrictRequest", "StrictResponse", "SuccessResponse"]
