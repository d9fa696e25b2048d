"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

from julienned.config import get_settings


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("JULIENNED_DATABASE_PATH", str(tmp_path / "other.db"))
    monkeypatch.setenv("JULIENNED_WEEK_STARTS_ON", "Sunday")
    monkeypatch.setenv("JULIENNED_ENABLE_CANNED_CATEGORY", "yes")
    monkeypatch.setenv("JULIENNED_LOG_REQUESTS", "0")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.database_path == Path(tmp_path / "other.db")
    assert settings.week_starts_on == "sunday"
    assert settings.enable_canned_category is True
    assert settings.log_requests is False


def test_unsupported_week_start_falls_back_to_monday(monkeypatch):
    monkeypatch.setenv("JULIENNED_WEEK_STARTS_ON", "friday")
    get_settings.cache_clear()

    assert get_settings().week_starts_on == "monday"


def test_env_file_fallback(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JULIENNED_API_TOKEN", raising=False)
    (tmp_path / ".env").write_text("# local\nJULIENNED_API_TOKEN=from-file\n", encoding="utf-8")
    get_settings.cache_clear()

    assert get_settings().api_token == "from-file"
