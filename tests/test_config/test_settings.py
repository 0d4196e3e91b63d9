"""Tests for application and generation settings."""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, get_settings
from src.generation.config import GenerationConfig


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        settings = Settings(_env_file=None)

        assert settings.github_api_base == "https://api.github.com"
        assert settings.default_per_page == 30
        assert settings.articles_key == "articles"
        assert settings.session_key == "session_snapshot"
        assert settings.github_configured is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        monkeypatch.setenv("DEFAULT_PER_PAGE", "50")

        settings = Settings(_env_file=None)

        assert settings.github_configured is True
        assert settings.default_per_page == 50

    def test_per_page_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_per_page=101)

    def test_is_production(self):
        assert Settings(_env_file=None, environment="production").is_production is True

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()


class TestGenerationConfig:
    def test_provider_selects_key_and_model(self):
        config = GenerationConfig(
            _env_file=None,
            provider="anthropic",
            openai_api_key="sk-openai",
            anthropic_api_key="sk-ant",
        )

        assert config.api_key.get_secret_value() == "sk-ant"
        assert config.model_name == config.anthropic_model

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GENERATION_PROVIDER", "anthropic")
        monkeypatch.setenv("GENERATION_MAX_TOKENS", "2048")

        config = GenerationConfig(_env_file=None)

        assert config.provider == "anthropic"
        assert config.max_tokens == 2048

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            GenerationConfig(_env_file=None, provider="gemini")
