"""Tests for OpenAI embedding provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import OpenAIError

from vecstore.errors import EmbeddingProviderError
from vecstore.providers.embedding import EmbeddingResponse, OpenAIEmbeddingProvider


class TestOpenAIEmbeddingProvider:
    """Tests for OpenAIEmbeddingProvider."""

    @pytest.fixture
    def mock_response(self):
        """Create a mock API response."""
        mock_obj = MagicMock()
        mock_obj.data = [
            MagicMock(embedding=[0.1] * 1536),
            MagicMock(embedding=[0.2] * 1536),
        ]
        mock_obj.usage = MagicMock(total_tokens=10, prompt_tokens=10)
        return mock_obj

    @pytest.fixture
    def provider(self):
        """Create an OpenAI provider with mocked API key."""
        with patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}):
            return OpenAIEmbeddingProvider(model="text-embedding-3-small")

    def test_provider_name(self, provider):
        """Should return provider name."""
        assert provider.provider_name == "openai"

    def test_dimensions_follow_model(self):
        """Should pick the model's native dimensions when none are given."""
        provider = OpenAIEmbeddingProvider(api_key="k", model="text-embedding-3-large")
        assert provider.dimensions == 3072

    def test_missing_api_key(self):
        """Should refuse to build without a key."""
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="OPENAI_API_KEY"):
                OpenAIEmbeddingProvider()

    @pytest.mark.asyncio
    async def test_embed_texts(self, provider, mock_response):
        """Should embed multiple texts via API."""
        provider._client.embeddings.create = AsyncMock(return_value=mock_response)

        response = await provider.embed(["Hello", "World"])

        assert isinstance(response, EmbeddingResponse)
        assert len(response.embeddings) == 2
        assert response.model == "text-embedding-3-small"
        assert response.dimensions == 1536
        assert response.usage == {"total_tokens": 10, "prompt_tokens": 10}

    @pytest.mark.asyncio
    async def test_embed_with_custom_dimensions(self, provider, mock_response):
        """Should use custom dimensions for text-embedding-3-* models."""
        provider._client.embeddings.create = AsyncMock(return_value=mock_response)

        await provider.embed(["Test"], dimensions=512)

        call_args = provider._client.embeddings.create.call_args
        assert call_args.kwargs["dimensions"] == 512

    @pytest.mark.asyncio
    async def test_ada_gets_no_dimensions(self, provider, mock_response):
        """Should not send dimensions to models that reject them."""
        provider._client.embeddings.create = AsyncMock(return_value=mock_response)

        await provider.embed(["Test"], model="text-embedding-ada-002")

        call_args = provider._client.embeddings.create.call_args
        assert call_args.kwargs["model"] == "text-embedding-ada-002"
        assert "dimensions" not in call_args.kwargs

    @pytest.mark.asyncio
    async def test_embed_documents_keeps_order(self, provider, mock_response):
        """Should return one vector per document in input order."""
        provider._client.embeddings.create = AsyncMock(return_value=mock_response)

        vectors = await provider.embed_documents(["Hello", "World"])

        assert vectors == [[0.1] * 1536, [0.2] * 1536]

    @pytest.mark.asyncio
    async def test_embed_query(self, provider, mock_response):
        """Should embed a single query."""
        mock_response.data = [MagicMock(embedding=[0.3] * 1536)]
        provider._client.embeddings.create = AsyncMock(return_value=mock_response)

        vector = await provider.embed_query("Test")

        assert vector == [0.3] * 1536
        assert provider._client.embeddings.create.call_args.kwargs["input"] == ["Test"]

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self, provider):
        """Should surface SDK failures as EmbeddingProviderError."""
        provider._client.embeddings.create = AsyncMock(side_effect=OpenAIError("rate limited"))

        with pytest.raises(EmbeddingProviderError, match="rate limited") as exc_info:
            await provider.embed(["Test"])

        assert isinstance(exc_info.value.cause, OpenAIError)
