"""Article generation service.

Orchestrates the generation pipeline for one activity:
validate -> check credentials -> build prompt -> call model -> parse.

Every failure surfaces as a ChronicleError subclass: ValidationError for
bad input, ConfigurationError for missing or rejected credentials,
ThrottlingError for quota/rate-limit failures, GenerationFailedError for
everything else.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from src.activity.schemas import Activity
from src.errors import ChronicleError, ConfigurationError, ThrottlingError
from src.generation.builder import GenerationRequestBuilder
from src.generation.config import GenerationConfig
from src.generation.errors import classify_generation_error
from src.generation.llm_client import LLMClient
from src.generation.parser import GenerationResponseParser
from src.observability.metrics import get_metrics
from src.storage.schemas import ArticleDraft, RepositoryRef

logger = logging.getLogger(__name__)


class GenerationService:
    """Turns one timeline activity into an article draft.

    Args:
        config: Generation configuration. Defaults to environment values.
        llm_client: Optional pre-built client (tests inject a mock).
        builder: Prompt builder.
        parser: Response parser.
    """

    def __init__(
        self,
        config: GenerationConfig | None = None,
        llm_client: LLMClient | None = None,
        builder: GenerationRequestBuilder | None = None,
        parser: GenerationResponseParser | None = None,
    ) -> None:
        self._config = config or GenerationConfig()
        self._llm = llm_client or LLMClient(self._config)
        self._builder = builder or GenerationRequestBuilder()
        self._parser = parser or GenerationResponseParser()
        self._metrics = get_metrics()

    @property
    def config(self) -> GenerationConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        api_key = self._config.api_key
        return bool(api_key and api_key.get_secret_value().strip())

    async def generate(
        self,
        activity: Activity | Mapping[str, Any],
        repository: RepositoryRef | None = None,
    ) -> ArticleDraft:
        """Generate an article draft for one activity.

        Args:
            activity: Commit or pull request, as a model or flat mapping.
            repository: Optional provenance attached to the draft.

        Returns:
            Draft with title, content, created_at and provenance set.

        Raises:
            ValidationError: If the activity is unusable. No remote call is made.
            ConfigurationError: Missing or rejected credentials.
            ThrottlingError: Upstream quota or rate limit.
            GenerationFailedError: Any other upstream failure.
        """
        activity = self._builder.validate(activity)

        if not self.is_configured:
            self._metrics.record_generation(activity.type, "configuration")
            raise ConfigurationError(
                f"No API key configured for provider {self._config.provider!r}"
            )

        prompt = self._builder.build_prompt(activity)

        start = time.perf_counter()
        try:
            raw_text = await self._llm.generate_text(prompt)
        except Exception as e:
            classified = classify_generation_error(e)
            outcome = _outcome_of(classified)
            self._metrics.record_generation(activity.type, outcome)
            logger.error(
                "Article generation failed for %s %s: %s (%s)",
                activity.type,
                activity.id,
                classified,
                outcome,
            )
            if classified is e:
                raise
            raise classified from e
        latency = time.perf_counter() - start

        draft = self._parser.parse(raw_text)
        draft.source_activity_type = activity.type
        draft.repository = repository

        self._metrics.record_generation(
            activity.type, "success", latency=latency, provider=self._llm.provider
        )
        logger.info(
            "Generated article %r from %s %s in %.2fs",
            draft.title,
            activity.type,
            activity.id,
            latency,
        )
        return draft

    async def close(self) -> None:
        """Release the underlying SDK clients."""
        await self._llm.close()


def _outcome_of(error: ChronicleError) -> str:
    if isinstance(error, ConfigurationError):
        return "configuration"
    if isinstance(error, ThrottlingError):
        return "throttled"
    return "failed"
