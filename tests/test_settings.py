"""Gemini settings defaults, environment overrides and bounds."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.config.settings import GeminiConfig


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    config = GeminiConfig(_env_file=None, _secrets_dir=None)

    assert config.api_key is None
    assert config.model == "gemini-2.5-flash-lite"
    assert config.inline_size_limit_bytes == 18 * 1024 * 1024
    assert config.poll_interval_seconds == 0.5
    assert config.default_media_type == "audio/webm"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret-key")
    monkeypatch.setenv("GEMINI_POLL_TIMEOUT_SECONDS", "42")

    config = GeminiConfig(_env_file=None, _secrets_dir=None)

    assert config.api_key.get_secret_value() == "secret-key"
    assert config.poll_timeout_seconds == 42.0


def test_poll_interval_is_bounded(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GEMINI_POLL_INTERVAL_SECONDS", "3")

    with pytest.raises(ValidationError):
        GeminiConfig(_env_file=None, _secrets_dir=None)
