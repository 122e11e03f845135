"""Boundary between key derivation and the counting backend.

ratekey derives bucket keys; storing counters, windowing and eviction belong
to whatever backend the host application plugs in here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Decision returned by a backend for one consume call.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max units per window for this bucket.
        remaining: Units left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface implemented by counting backends (Redis, memcached, ...).

    Implementations must raise
    :class:`ratekey.core.errors.RateLimiterBackendAppError` when their store
    is unreachable so the HTTP layer can fail open or closed as configured.
    """

    #: Short backend name used in logs.
    name: str = "unknown"

    @abstractmethod
    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        """Consume budget for a bucket key.

        Args:
            key: Bucket key, ``rl:<category>:<identifier>``.
            cost: Units to consume (default 1).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
