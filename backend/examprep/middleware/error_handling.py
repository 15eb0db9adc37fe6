"""
Error Handling Middleware

Provides consistent, informative error responses across the API.

Features:
- Standardized error response format ({"success": false, ...})
- Correlation IDs for log tracking
- Sanitized responses (hides internal details in production)
- Custom exception classes for the service layer

Usage:
    from examprep.middleware.error_handling import (
        ErrorHandlingMiddleware,
        StoreUnavailableError,
    )

    # Add middleware to app
    app.add_middleware(ErrorHandlingMiddleware)

    # Raise custom exceptions from services
    raise StoreUnavailableError("Could not read topic progress")

Exception handling hierarchy:
    - HTTPException: Re-raised for FastAPI's built-in handler
    - ServiceError: Custom exceptions → structured JSON response
    - Exception: Catch-all for unexpected errors → sanitized response
"""

import functools
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Error Response Schema
# =============================================================================


class ErrorResponse(BaseModel):
    """Standardized error response."""

    success: bool = False
    error: str  # Error code (e.g., "store_unavailable")
    message: str  # Human-readable message
    error_id: str  # For log correlation
    details: Optional[dict] = None  # Additional context (debug only)
    timestamp: datetime


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - HTTP status code
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Something went wrong", status_code=500)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class ValidationError(ServiceError):
    """
    Data validation error.

    Raised when input passes schema validation but violates a service rule
    (e.g. logging zero minutes).
    """

    status_code = 422
    error_code = "validation_error"


class StoreUnavailableError(ServiceError):
    """
    Persistent store failure.

    Raised when a database read or write fails. The surrounding transaction
    has been rolled back, so nothing from the failed operation is persisted.
    No retry is attempted at this layer.
    """

    status_code = 503
    error_code = "store_unavailable"


class LLMError(ServiceError):
    """
    Text generation failed on a path without a local fallback.

    Raised when LLM API calls fail after retries (rate limits, timeouts, etc.)
    """

    status_code = 502
    error_code = "llm_error"


# =============================================================================
# Error Handling Middleware
# =============================================================================


def _error_content(
    error_code: str,
    message: str,
    error_id: str,
    details: Optional[dict] = None,
) -> dict[str, Any]:
    return {
        "success": False,
        "error": error_code,
        "message": message,
        "errorId": error_id,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches unhandled exceptions
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details in production
    """

    def __init__(self, app, debug: bool = False):
        """
        Initialize middleware.

        Args:
            app: FastAPI/Starlette application
            debug: Whether to include stack traces in responses
        """
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            response = await call_next(request)
            return response

        except HTTPException:
            # Let FastAPI handle HTTP exceptions
            raise

        except ServiceError as e:
            logger.error(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                    "details": e.details,
                },
            )

            return JSONResponse(
                status_code=e.status_code,
                content=_error_content(
                    e.error_code,
                    e.message,
                    error_id,
                    e.details if self.debug else None,
                ),
            )

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            details = None
            if self.debug:
                details = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return JSONResponse(
                status_code=500,
                content=_error_content(
                    "internal_server_error",
                    "An unexpected error occurred",
                    error_id,
                    details,
                ),
            )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Exception handler for ServiceError raised inside route handlers.

    FastAPI routes exceptions through registered handlers before they reach
    BaseHTTPMiddleware, so this keeps the response format identical.
    """
    error_id = str(uuid4())[:8]
    logger.error(
        f"[{error_id}] {exc.error_code}: {exc.message}",
        extra={
            "error_id": error_id,
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.error_code, exc.message, error_id),
    )


# =============================================================================
# Setup Function
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include stack traces in responses
    """
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)
    logger.info(f"Error handling middleware enabled (debug={debug})")


# =============================================================================
# Endpoint Decorator
# =============================================================================


def handle_endpoint_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap a route handler with consistent error logging.

    ServiceError and HTTPException pass through unchanged so their status
    codes survive; anything else is logged and turned into a 500.

    Args:
        operation: Human-readable name used in log lines and the error detail.

    Example:
        @router.get("/streak/{user_id}")
        @handle_endpoint_errors("Get streak")
        async def get_streak(...):
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except (HTTPException, ServiceError):
                raise
            except Exception as e:
                logger.exception(f"{operation} failed: {e}")
                raise HTTPException(status_code=500, detail=f"{operation} failed")

        return wrapper

    return decorator
