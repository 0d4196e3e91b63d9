"""Application settings using Pydantic Settings for environment-based configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the repo-chronicle application.

    All settings can be overridden via environment variables.
    Prefix is not used to allow standard env var names (e.g., GITHUB_TOKEN).
    Text generation settings live in GenerationConfig (GENERATION_ prefix).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # GitHub REST API
    github_api_base: str = "https://api.github.com"
    github_token: str | None = None
    github_api_version: str = "2022-11-28"
    default_per_page: int = Field(default=30, ge=1, le=100)
    http_timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)

    # Local storage
    data_dir: str = ".chronicle"
    articles_key: str = "articles"
    session_key: str = "session_snapshot"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8001
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    cors_allow_credentials: bool = True

    # Observability
    metrics_port: int = 8000

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def github_configured(self) -> bool:
        """Check if a GitHub token is configured (unauthenticated access is rate limited)."""
        return bool(self.github_token)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()
