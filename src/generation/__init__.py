"""Article generation from timeline activities."""

from src.generation.builder import GenerationRequestBuilder
from src.generation.config import GenerationConfig
from src.generation.errors import classify_generation_error
from src.generation.llm_client import LLMClient
from src.generation.parser import GenerationResponseParser, extract_title
from src.generation.service import GenerationService

__all__ = [
    "GenerationConfig",
    "GenerationRequestBuilder",
    "GenerationResponseParser",
    "GenerationService",
    "LLMClient",
    "classify_generation_error",
    "extract_title",
]
