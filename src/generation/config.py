"""Configuration for the article generation service.

Provides Pydantic settings for the text generation provider, API keys,
model selection and request limits. All settings can be overridden via
GENERATION_* environment variables.
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationConfig(BaseSettings):
    """Configuration for turning an activity into an article.

    Settings can be overridden via environment variables prefixed with GENERATION_.

    Example:
        GENERATION_PROVIDER=anthropic
        GENERATION_ANTHROPIC_API_KEY=sk-ant-...
        GENERATION_MAX_TOKENS=4096
    """

    model_config = SettingsConfigDict(
        env_prefix="GENERATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["openai", "anthropic"] = Field(
        default="openai",
        description="Text generation provider",
    )

    # LLM API keys
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key",
    )
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key",
    )

    # Model selection
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model used for article generation",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-5-20250929",
        description="Anthropic model used for article generation",
    )

    max_tokens: int = Field(
        default=4096,
        ge=256,
        le=16384,
        description="Maximum tokens in the generated article",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )

    # LLM request timeout
    llm_timeout: float = Field(
        default=60.0,
        ge=5.0,
        le=300.0,
        description="Timeout in seconds for LLM API calls",
    )

    @property
    def model_name(self) -> str:
        """Model identifier for the configured provider."""
        if self.provider == "anthropic":
            return self.anthropic_model
        return self.openai_model

    @property
    def api_key(self) -> SecretStr | None:
        """API key for the configured provider."""
        if self.provider == "anthropic":
            return self.anthropic_api_key
        return self.openai_api_key
