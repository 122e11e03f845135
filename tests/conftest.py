"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any import of ``ratekey.core.config``
so the module-level settings instance picks them up.
"""

import os

import pytest

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("RATE_LIMIT_CATEGORIES", "comments,posts,requests,c,p")
os.environ.setdefault("LOG_FORMAT", "json")

from ratekey.core.rate_limit import configure_rate_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Each test starts without a registered limiter backend."""
    configure_rate_limiter(None)
    yield
    configure_rate_limiter(None)
