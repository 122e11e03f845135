"""Application-level exception types.

Domain errors raised around rate limiting, rendered to HTTP responses by
``ratekey.core.exception_handlers``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    category: str
    allowed_categories: list[str]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when route or config declarations are invalid (startup failure)."""


class RateLimiterUnavailableAppError(AppError):
    """Raised when limiting is enabled but no limiter backend is configured."""


class RateLimiterBackendAppError(AppError):
    """Raised by limiter backends when their counter store fails."""
