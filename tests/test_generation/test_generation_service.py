"""Tests for GenerationService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.errors import (
    ConfigurationError,
    GenerationFailedError,
    ThrottlingError,
    ValidationError,
)
from src.generation.config import GenerationConfig
from src.generation.llm_client import LLMClient
from src.generation.service import GenerationService
from src.storage.schemas import RepositoryRef


def _make_config(**overrides) -> GenerationConfig:
    values = {"provider": "openai", "openai_api_key": "sk-test"}
    values.update(overrides)
    return GenerationConfig(**values)


@pytest.fixture
def mock_llm():
    llm = AsyncMock(spec=LLMClient)
    llm.generate_text = AsyncMock(return_value="# Taming cache races\n\nBody.")
    llm.provider = "openai"
    return llm


@pytest.fixture
def service(mock_llm) -> GenerationService:
    return GenerationService(config=_make_config(), llm_client=mock_llm)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success(self, service, mock_llm, commit_activity):
        draft = await service.generate(commit_activity)

        assert draft.title == "Taming cache races"
        assert draft.content == "# Taming cache races\n\nBody."
        assert draft.source_activity_type == "commit"
        assert draft.created_at is not None
        mock_llm.generate_text.assert_awaited_once()
        prompt = mock_llm.generate_text.call_args.args[0]
        assert "Fix race in cache invalidation" in prompt

    @pytest.mark.asyncio
    async def test_repository_provenance_attached(self, service, pr_activity):
        repository = RepositoryRef(owner="octocat", name="hello-world")

        draft = await service.generate(pr_activity, repository=repository)

        assert draft.repository == repository
        assert draft.source_activity_type == "pull_request"

    @pytest.mark.asyncio
    async def test_accepts_flat_payload(self, service):
        draft = await service.generate(
            {"type": "pull_request", "id": 3, "title": "Add CLI", "author": "grace"}
        )
        assert draft.source_activity_type == "pull_request"

    @pytest.mark.asyncio
    async def test_validation_error_skips_remote_call(self, service, mock_llm):
        with pytest.raises(ValidationError):
            await service.generate({"type": "commit", "id": "abc", "message": ""})

        mock_llm.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_key_is_configuration_error(self, mock_llm, commit_activity):
        service = GenerationService(
            config=_make_config(openai_api_key=None), llm_client=mock_llm
        )

        with pytest.raises(ConfigurationError):
            await service.generate(commit_activity)

        mock_llm.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_checked_for_selected_provider(self, mock_llm, commit_activity):
        service = GenerationService(
            config=_make_config(provider="anthropic", anthropic_api_key=None),
            llm_client=mock_llm,
        )

        with pytest.raises(ConfigurationError):
            await service.generate(commit_activity)

    @pytest.mark.asyncio
    async def test_quota_error_is_throttling(self, service, mock_llm, commit_activity):
        mock_llm.generate_text.side_effect = RuntimeError("You exceeded your current quota")

        with pytest.raises(ThrottlingError) as exc_info:
            await service.generate(commit_activity)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_rejected_key_is_configuration_error(self, service, mock_llm, commit_activity):
        mock_llm.generate_text.side_effect = RuntimeError("Incorrect API key provided")

        with pytest.raises(ConfigurationError):
            await service.generate(commit_activity)

    @pytest.mark.asyncio
    async def test_other_error_is_generation_failure(self, service, mock_llm, commit_activity):
        mock_llm.generate_text.side_effect = RuntimeError("connection reset")

        with pytest.raises(GenerationFailedError):
            await service.generate(commit_activity)

    @pytest.mark.asyncio
    async def test_headingless_output_gets_fallback_title(self, service, mock_llm, commit_activity):
        mock_llm.generate_text.return_value = "Just prose."

        draft = await service.generate(commit_activity)

        assert draft.title == "Untitled technical article"


class TestLLMClient:
    @pytest.mark.asyncio
    async def test_openai_request_shape(self):
        client = LLMClient(_make_config())
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content="# Title\nBody"))]
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=completion)
        client._openai_client = sdk

        text = await client.generate_text("prompt text")

        assert text == "# Title\nBody"
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1] == {"role": "user", "content": "prompt text"}

    @pytest.mark.asyncio
    async def test_anthropic_joins_text_blocks(self):
        client = LLMClient(_make_config(provider="anthropic", anthropic_api_key="sk-ant"))
        response = MagicMock()
        response.content = [
            MagicMock(type="text", text="# Title\n"),
            MagicMock(type="text", text="Body"),
        ]
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(return_value=response)
        client._anthropic_client = sdk

        text = await client.generate_text("prompt text")

        assert text == "# Title\nBody"
        assert sdk.messages.create.call_args.kwargs["messages"] == [
            {"role": "user", "content": "prompt text"}
        ]

    @pytest.mark.asyncio
    async def test_missing_key_raises_before_sdk_use(self):
        client = LLMClient(_make_config(openai_api_key=None))

        with pytest.raises(ConfigurationError):
            await client.generate_text("prompt text")

    @pytest.mark.asyncio
    async def test_close_releases_clients(self):
        client = LLMClient(_make_config())
        sdk = MagicMock()
        sdk.close = AsyncMock()
        client._openai_client = sdk

        await client.close()

        sdk.close.assert_awaited_once()
        assert client._openai_client is None
