"""Tests for settings parsing."""

from __future__ import annotations

import pytest

from ratekey.core.config import LogSettings, RateLimitSettings, parse_categories


class TestParseCategories:
    def test_parses_and_trims(self) -> None:
        assert parse_categories(" comments , posts,requests ") == {"comments", "posts", "requests"}

    @pytest.mark.parametrize("value", [None, "", " , ,"])
    def test_empty_values(self, value) -> None:
        assert parse_categories(value) == set()

    def test_deduplicates(self) -> None:
        assert parse_categories("posts,posts") == {"posts"}


class TestRateLimitSettings:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
        monkeypatch.setenv("RATE_LIMIT_CATEGORIES", "votes,follows")
        monkeypatch.setenv("RATE_LIMIT_FAIL_OPEN", "true")

        cfg = RateLimitSettings()

        assert cfg.enabled is False
        assert cfg.fail_open is True
        assert cfg.category_set == {"votes", "follows"}

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ENABLED", "CATEGORIES", "INCLUDE_HEADERS", "FAIL_OPEN"):
            monkeypatch.delenv(f"RATE_LIMIT_{name}", raising=False)

        cfg = RateLimitSettings()

        assert cfg.enabled is True
        assert cfg.include_headers is True
        assert cfg.fail_open is False
        assert cfg.category_set == {"comments", "posts", "requests"}


def test_log_settings_reject_negative_rotation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_MAX_BYTES", "-1")

    with pytest.raises(ValueError):
        LogSettings()
