"""
Unit tests for configuration management.

Tests environment variable loading, validation and caching.
"""

import logging

import pytest
from pydantic import ValidationError

from datagenie.config import (
    LLMSettings,
    LoggingSettings,
    PromptSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestLLMSettings:
    """Test LLM backend settings."""

    def test_defaults(self):
        settings = LLMSettings()

        assert settings.provider == "openai"
        assert settings.temperature == 0.15
        assert settings.max_tokens == 1000
        assert settings.request_timeout_seconds == 120

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("LLM_MODEL", "sqlcoder")
        monkeypatch.setenv("LLM_REQUEST_TIMEOUT_SECONDS", "15")

        settings = LLMSettings()

        assert settings.provider == "ollama"
        assert settings.model == "sqlcoder"
        assert settings.request_timeout_seconds == 15

    def test_api_key_required_for_openai(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY")

        with pytest.raises(ValidationError, match="API key required"):
            LLMSettings(provider="openai")

    def test_azure_requires_endpoint(self):
        with pytest.raises(ValidationError, match="Endpoint required"):
            LLMSettings(provider="azure_openai", api_key="key")

    def test_ollama_and_copilot_need_no_key(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY")

        assert LLMSettings(provider="ollama").endpoint == "http://localhost:11434"
        assert LLMSettings(provider="copilot").api_key is None

    def test_unknown_provider_rejected(self):
        with pytest.raises(ValidationError):
            LLMSettings(provider="google")

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ValidationError):
            LLMSettings(request_timeout_seconds=timeout)

    def test_temperature_range(self):
        with pytest.raises(ValidationError):
            LLMSettings(temperature=3.0)


class TestPromptSettings:
    """Test prompt settings."""

    def test_defaults(self):
        settings = PromptSettings()

        assert settings.max_tables == 200
        assert settings.max_columns_per_table == 200
        assert settings.include_config_as_hints is True
        assert settings.cache_size == 8

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PROMPT_MAX_TABLES", "0")
        monkeypatch.setenv("PROMPT_INCLUDE_CONFIG_AS_HINTS", "false")

        settings = PromptSettings()

        assert settings.max_tables == 0
        assert settings.include_config_as_hints is False


class TestLoggingSettings:
    """Test logging configuration."""

    def test_configure_sets_level(self):
        LoggingSettings(level="WARNING").configure()

        assert logging.getLogger().level == logging.WARNING

    def test_configure_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "datagenie.log"
        LoggingSettings(file=log_file).configure()

        logging.getLogger("datagenie.test").warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()


class TestGetSettings:
    """Test settings caching."""

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_clear_cache_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("PROMPT_CACHE_SIZE", "3")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.prompt.cache_size == 3

    def test_nested_settings(self):
        settings = Settings()

        assert settings.app_name == "DataGenie"
        assert settings.llm.provider == "openai"
        assert not settings.is_production
