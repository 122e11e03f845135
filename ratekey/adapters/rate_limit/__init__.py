"""Rate limiter backend interface.

Counting lives outside this package; backends implement
``AbstractRateLimiter`` and are registered with
``ratekey.core.rate_limit.configure_rate_limiter``.
"""

from ratekey.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

__all__ = ["AbstractRateLimiter", "RateLimitResult"]
