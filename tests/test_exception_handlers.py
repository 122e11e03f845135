"""Tests for global exception handlers."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ratekey.core.errors import (
    AppError,
    RateLimiterBackendAppError,
    RateLimiterUnavailableAppError,
)
from ratekey.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (RateLimiterUnavailableAppError(code="rate_limiter_not_configured", message="none"), 503),
            (RateLimiterBackendAppError(code="rate_limiter_backend_error", message="down"), 503),
            (AppError(code="other", message="other"), 500),
        ],
    )
    def test_status_code_by_error_type(
        self, client: TestClient, app_with_handlers: FastAPI, error: AppError, status_code: int
    ):
        @app_with_handlers.get("/boom")
        async def boom():
            raise error

        response = client.get("/boom")

        assert response.status_code == status_code
        data = response.json()
        assert data["error"]["code"] == error.code
        assert data["error"]["message"] == error.message
        assert "request_id" in data["error"]
        assert "details" not in data["error"]

    def test_details_are_included(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/details")
        async def details():
            raise RateLimiterUnavailableAppError(
                code="rate_limiter_not_configured",
                message="Rate limiting is enabled but no limiter backend is configured",
                details={"hint": "Pass a limiter to create_app()"},
            )

        response = client.get("/details")

        assert response.status_code == 503
        assert response.json()["error"]["details"]["hint"] == "Pass a limiter to create_app()"


class TestGeneralExceptionHandler:
    def test_hides_exception_message(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        response = asyncio.run(general_exception_handler(request, RuntimeError("redis at 10.0.0.5 refused")))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "10.0.0.5" not in data["error"]["message"]
        assert "RuntimeError" not in json.dumps(data)

    def test_handlers_registered(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers
