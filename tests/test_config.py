"""Tests for environment-driven configuration."""

import pytest

from cortexmix.config import Config


def test_validate_requires_provider_key(monkeypatch):
    monkeypatch.setattr(Config, "LLM_PROVIDER", "groq")
    monkeypatch.setattr(Config, "GROQ_API_KEY", None)

    with pytest.raises(ValueError, match="GROQ_API_KEY"):
        Config.validate()

    monkeypatch.setattr(Config, "GROQ_API_KEY", "gsk-test")
    Config.validate()


def test_validate_ollama_needs_no_key(monkeypatch):
    monkeypatch.setattr(Config, "LLM_PROVIDER", "ollama")
    monkeypatch.setattr(Config, "OPENAI_API_KEY", None)
    Config.validate()


def test_validate_rejects_bad_rate_limit(monkeypatch):
    monkeypatch.setattr(Config, "LLM_PROVIDER", "openai")
    monkeypatch.setattr(Config, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(Config, "RATE_LIMIT_MAX_REQUESTS", 0)

    with pytest.raises(ValueError, match="Rate limit"):
        Config.validate()


def test_display_summarizes_settings(monkeypatch):
    monkeypatch.setattr(Config, "LLM_PROVIDER", "groq")
    monkeypatch.setattr(Config, "RATE_LIMIT_MAX_REQUESTS", 25)
    monkeypatch.setattr(Config, "RATE_LIMIT_INTERVAL_SECONDS", 60.0)

    text = Config.display()

    assert text.startswith("cortexmix Configuration:")
    assert "LLM Provider: groq" in text
    assert "Rate Limit: 25 req / 60s" in text
