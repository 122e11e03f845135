"""Rate limiting dependency for FastAPI routes.

Routes opt in per limit category:

    @router.post("/comments", dependencies=[Depends(rate_limit("comments"))])

The dependency derives the bucket key from the request's ``Authorization``
header or client address (see ``ratekey.core.keys``) and consumes one unit
from the configured backend. Counting is the backend's job; this module only
keys requests and turns denials into HTTP 429.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from ratekey.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from ratekey.core.config import settings
from ratekey.core.errors import (
    RateLimiterBackendAppError,
    RateLimiterUnavailableAppError,
    ValidationAppError,
)
from ratekey.core.keys import RequestView, derive_request_key, identifier_source
from ratekey.core.logging import hash_key

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None


def configure_rate_limiter(limiter: AbstractRateLimiter | None) -> None:
    """Register the process-wide limiter backend (None unregisters)."""

    global _limiter
    _limiter = limiter


def get_rate_limiter() -> AbstractRateLimiter | None:
    return _limiter


def request_view(request: Request) -> RequestView:
    """Project a request onto the fields key derivation may read.

    Starlette ``Headers`` are case-insensitive, so ``Authorization`` and
    ``authorization`` resolve to the same value.
    """

    client_host = request.client.host if request.client else None
    return RequestView(headers=request.headers, network_address=client_host)


def _rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


async def _consume(limiter: AbstractRateLimiter, key: str, log_extra: dict) -> RateLimitResult | None:
    """Consume one unit, applying the fail-open policy on backend errors.

    Backends are synchronous and usually talk to a network store, so the call
    runs in the threadpool to keep the event loop free.

    Returns:
        The backend decision, or None when the backend failed and
        ``fail_open`` let the request through.

    Raises:
        RateLimiterBackendAppError: Backend failed and fail_open is off.
    """

    try:
        return await run_in_threadpool(limiter.consume, key)
    except RateLimiterBackendAppError as exc:
        logger.error(
            "rate_limit.backend_error",
            extra={
                **log_extra,
                "backend": limiter.name,
                "error_code": exc.code,
                "fail_open": settings.rate_limit.fail_open,
            },
        )
        if settings.rate_limit.fail_open:
            return None
        raise


def rate_limit(category: str) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency enforcing the limit for ``category``.

    Args:
        category: Limit category label; must be in ``RATE_LIMIT_CATEGORIES``.

    Returns:
        Async dependency to use with ``Depends``.

    Raises:
        ValidationAppError: If the category is not in the configured set.
            Raised while routes are declared, so it aborts app startup and
            never reaches the HTTP exception handlers.
    """

    allowed = settings.rate_limit.category_set
    if category not in allowed:
        raise ValidationAppError(
            code="unknown_rate_limit_category",
            message=f"Unknown rate limit category: {category!r}",
            details={"category": category, "allowed_categories": sorted(allowed)},
        )

    async def enforce_rate_limit(request: Request) -> None:
        """Consume one unit from the requester's bucket or raise HTTP 429.

        Raises:
            HTTPException: 429 Too Many Requests when the backend denies.
            RateLimiterUnavailableAppError: Limiting enabled without a backend.
            RateLimiterBackendAppError: Backend failed and fail_open is off.
        """

        if not settings.rate_limit.enabled:
            logger.debug("rate_limit.disabled", extra={"category": category})
            return

        limiter = get_rate_limiter()
        if limiter is None:
            raise RateLimiterUnavailableAppError(
                code="rate_limiter_not_configured",
                message="Rate limiting is enabled but no limiter backend is configured",
                details={"hint": "Pass a limiter to create_app() or set RATE_LIMIT_ENABLED=false"},
            )

        view = request_view(request)
        key = derive_request_key(view, category)
        log_extra = {
            "category": category,
            "key_type": identifier_source(view.headers, view.network_address).value,
            "key_hash": hash_key(key),
        }

        result = await _consume(limiter, key, log_extra)
        if result is None:
            return
        if result.allowed:
            logger.info(
                "rate_limit.allowed",
                extra={**log_extra, "limit": result.limit, "remaining": result.remaining},
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                **log_extra,
                "limit": result.limit,
                "remaining": result.remaining,
                "retry_after_s": retry_after,
            },
        )

        headers = _rate_limit_headers(result) if settings.rate_limit.include_headers else None
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
            headers=headers,
        )

    return enforce_rate_limit
