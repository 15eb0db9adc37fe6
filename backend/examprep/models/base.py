"""
Strict Base Model for API Request/Response Validation

This module provides base classes with strict validation settings to harden
the API contract between backend and web client.

The web client speaks camelCase JSON (userId, timeSpentMinutes, ...) while
Python code uses snake_case. Both bases generate camelCase aliases and accept
either spelling on input; FastAPI serialises responses by alias.

Usage:
    # For request bodies (strictest validation)
    class TrackTimeRequest(StrictRequest):
        user_id: str
        minutes: int

    # For response bodies (allows extra fields from DB)
    class TrackTimeResponse(StrictResponse):
        time_spent_minutes: int

Architecture:
    API Request → StrictRequest (extra="forbid") → Route Handler
    DB Model → StrictResponse (extra="ignore") → API Response
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Features:
        - extra="forbid": Unknown fields raise 422 Unprocessable Entity
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - alias_generator=to_camel: Accepts camelCase field names
        - populate_by_name=True: Also accepts snake_case field names
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    Features:
        - extra="ignore": Silently ignores extra fields (DB may have more columns)
        - from_attributes=True: Allows ORM model conversion
        - alias_generator=to_camel: Serialised with camelCase keys
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SuccessResponse(StrictResponse):
    """Response envelope for successful calls; errors use ErrorResponse."""

    success: bool = True
