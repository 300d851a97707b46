"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from approval_engine.config import Settings, get_settings, reset_settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.stale_pending_working_days == 7
    assert settings.sweep_interval_seconds == 3600
    assert settings.allow_requester_pending_cancel is False


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_reset_settings_rereads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("SWEEP_INTERVAL_SECONDS", "60")
    reset_settings()

    second = get_settings()
    assert second is not first
    assert second.sweep_interval_seconds == 60


def test_rejects_non_positive_threshold(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STALE_PENDING_WORKING_DAYS", "0")
    with pytest.raises(ValidationError):
        Settings()
