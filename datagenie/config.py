"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from datagenie.config import get_settings

    settings = get_settings()
    print(settings.llm.provider)
    print(settings.prompt.max_tables)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "azure_openai", "ollama", "anthropic", "copilot"]

DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"


class LLMSettings(BaseSettings):
    """LLM backend configuration. The provider is chosen once, at startup."""

    provider: ProviderName = Field(
        default="openai",
        description="Backend used to generate SQL",
    )
    endpoint: str | None = Field(
        None,
        description="Service endpoint (Azure resource URL or Ollama base URL)",
    )
    api_key: str | None = Field(
        None,
        description="API key for openai, azure_openai and anthropic",
    )
    model: str | None = Field(
        None,
        description="Model or Azure deployment name (None = provider default)",
    )
    api_version: str = Field(
        default="2024-06-01",
        description="Azure OpenAI API version",
    )
    cli_path: str | None = Field(
        None,
        description="Path to the Copilot CLI executable (copilot provider only)",
    )

    temperature: float = Field(
        default=0.15,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    max_tokens: int = Field(
        default=1000,
        gt=0,
        description="Maximum tokens per response",
    )
    request_timeout_seconds: float = Field(
        default=120,
        gt=0,
        description="Timeout budget for one backend call",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_provider_requirements(self) -> "LLMSettings":
        """Ensure the selected provider has what it needs."""
        if self.provider in ("openai", "azure_openai", "anthropic") and not self.api_key:
            raise ValueError(f"API key required for {self.provider} provider. Set LLM_API_KEY")

        if self.provider == "azure_openai" and not self.endpoint:
            raise ValueError("Endpoint required for azure_openai provider. Set LLM_ENDPOINT")

        if self.provider == "ollama" and not self.endpoint:
            self.endpoint = DEFAULT_OLLAMA_ENDPOINT

        return self


class PromptSettings(BaseSettings):
    """System prompt rendering and caching."""

    max_tables: int = Field(
        default=200,
        ge=0,
        description="Render at most this many tables (schema order)",
    )
    max_columns_per_table: int = Field(
        default=200,
        ge=0,
        description="Render at most this many columns per table",
    )
    include_config_as_hints: bool = Field(
        default=True,
        description="Send the config JSON as HINTS when the caller passes none",
    )
    cache_size: int = Field(
        default=8,
        gt=0,
        description="Number of schema/config pairs whose prompts are kept",
    )

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_",
        env_file=".env",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stderr only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Environment Variables:
        ENVIRONMENT: Deployment environment (development, staging, production)
        APP_NAME: Application name for logging
        LLM_*: Backend configuration (see LLMSettings)
        PROMPT_*: Prompt rendering limits and cache (see PromptSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.llm.provider
        'openai'
        >>> settings.prompt.max_tables
        200
    """

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    app_name: str = Field(
        default="DataGenie",
        description="Application name",
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    prompt: PromptSettings = Field(default_factory=PromptSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @model_validator(mode="after")
    def configure_logging(self) -> "Settings":
        """Configure logging when settings are loaded."""
        self.logging.configure()
        return self

    def model_post_init(self, __context) -> None:
        """Log configuration on initialization."""
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "llm_provider": self.llm.provider,
                "request_timeout_seconds": self.llm.request_timeout_seconds,
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("DATAGENIE_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
