"""Application factory for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI

from ratekey.adapters.rate_limit.base import AbstractRateLimiter
from ratekey.api.routes import health_router
from ratekey.core.config import settings
from ratekey.core.exception_handlers import setup_exception_handlers
from ratekey.core.logging import configure_logging
from ratekey.core.middleware import request_id_middleware
from ratekey.core.rate_limit import configure_rate_limiter


def create_app(limiter: AbstractRateLimiter | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        limiter: Counting backend used by ``rate_limit`` dependencies. When
            omitted, any previously registered backend is kept.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    if limiter is not None:
        configure_rate_limiter(limiter)

    app = FastAPI(
        title="ratekey",
        description=(
            "Rate limit bucket keys derived from the Authorization bearer "
            "credential or the client address."
        ),
        version="0.1.0",
    )

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)
    app.include_router(health_router)

    return app
