"""
Middleware Package

Provides FastAPI middleware for:
- Rate limiting
- Error handling

Rate limiting usage:
    from examprep.middleware import limiter
    from examprep.enums import RateLimitType
    from examprep.config import settings

    @limiter.limit(settings.get_rate_limit(RateLimitType.LLM_HEAVY))
    async def my_endpoint(request: Request):
        ...
"""

from examprep.middleware.error_handling import (
    ErrorHandlingMiddleware,
    LLMError,
    ServiceError,
    StoreUnavailableError,
    ValidationError,
    handle_endpoint_errors,
    setup_error_handling,
)
from examprep.middleware.rate_limit import get_rate_limit, limiter, setup_rate_limiting

__all__ = [
    "setup_rate_limiting",
    "limiter",
    "get_rate_limit",
    "ErrorHandlingMiddleware",
    "setup_error_handling",
    "handle_endpoint_errors",
    "ServiceError",
    "ValidationError",
    "StoreUnavailableError",
    "LLMError",
]
