"""LLM API abstraction for article generation.

Provides a unified interface to OpenAI and Anthropic chat models with lazy
SDK initialization. SDK imports are deferred to method calls (lazy loading)
to avoid import-time failures when API keys are not configured.
"""

import logging
from typing import Any

from src.errors import ConfigurationError
from src.generation.config import GenerationConfig
from src.generation.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class LLMClient:
    """Unified text generation client for OpenAI and Anthropic.

    Features:
    - Lazy SDK initialization (import on first use)
    - Provider chosen by configuration
    - Missing credentials reported before any request is made

    Args:
        config: Generation configuration with provider, API keys and model names.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config = config
        self._openai_client: Any = None
        self._anthropic_client: Any = None

    @property
    def provider(self) -> str:
        return self._config.provider

    @property
    def model(self) -> str:
        return self._config.model_name

    def _require_key(self) -> str:
        api_key = self._config.api_key
        key_str = api_key.get_secret_value() if api_key else ""
        if not key_str.strip():
            raise ConfigurationError(
                f"No API key configured for provider {self._config.provider!r} "
                f"(set GENERATION_{self._config.provider.upper()}_API_KEY)"
            )
        return key_str

    def _get_openai_client(self) -> Any:
        """Lazy-initialize OpenAI async client."""
        if self._openai_client is None:
            api_key = self._require_key()
            import openai

            self._openai_client = openai.AsyncOpenAI(
                api_key=api_key,
                timeout=self._config.llm_timeout,
            )
        return self._openai_client

    def _get_anthropic_client(self) -> Any:
        """Lazy-initialize Anthropic async client."""
        if self._anthropic_client is None:
            api_key = self._require_key()
            import anthropic

            self._anthropic_client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=self._config.llm_timeout,
            )
        return self._anthropic_client

    async def generate_text(self, prompt: str) -> str:
        """Send one prompt and return the generated text.

        Args:
            prompt: Fully rendered user prompt.

        Returns:
            Generated text (may be empty if the model returned nothing).

        Raises:
            ConfigurationError: If the provider's API key is missing.
            Exception: Upstream SDK errors propagate unchanged for the caller
                to classify.
        """
        if self._config.provider == "anthropic":
            return await self._generate_with_anthropic(prompt)
        return await self._generate_with_openai(prompt)

    async def _generate_with_openai(self, prompt: str) -> str:
        client = self._get_openai_client()
        response = await client.chat.completions.create(
            model=self._config.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def _generate_with_anthropic(self, prompt: str) -> str:
        client = self._get_anthropic_client()
        response = await client.messages.create(
            model=self._config.anthropic_model,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        # Concatenate text blocks; other block types carry no article text
        parts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not parts:
            logger.warning("Anthropic response contained no text block")
        return "".join(parts)

    async def close(self) -> None:
        """Clean up SDK clients."""
        if self._openai_client is not None:
            await self._openai_client.close()
            self._openai_client = None
        if self._anthropic_client is not None:
            await self._anthropic_client.close()
            self._anthropic_client = None
