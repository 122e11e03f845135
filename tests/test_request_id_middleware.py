from __future__ import annotations

from fastapi.testclient import TestClient

from ratekey.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from ratekey.core.rate_limit import configure_rate_limiter
from ratekey.main import app


client = TestClient(app)


class _AllowAll(AbstractRateLimiter):
    def consume(self, key: str, *, cost: int = 1) -> RateLimitResult:
        return RateLimitResult(allowed=True, limit=1, remaining=1, reset_at=0)


def test_preserves_incoming_request_id_header():
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing():
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_health_reports_missing_limiter():
    body = client.get("/health").json()

    assert body == {"status": "ok", "rate_limit_enabled": True, "rate_limiter_configured": False}


def test_health_reports_configured_limiter():
    configure_rate_limiter(_AllowAll())

    assert client.get("/health").json()["rate_limiter_configured"] is True
