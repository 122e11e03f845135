from __future__ import annotations

from fastapi import APIRouter

from ratekey.core.config import settings
from ratekey.core.rate_limit import get_rate_limiter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Reports whether rate limiting is enabled and a limiter backend is
    registered, so a deployment that forgot to wire one is visible before
    limited routes start answering 503.
    """

    return {
        "status": "ok",
        "rate_limit_enabled": settings.rate_limit.enabled,
        "rate_limiter_configured": get_rate_limiter() is not None,
    }
