"""OpenAI embedding provider."""

import os
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from vecstore.errors import EmbeddingProviderError
from vecstore.observability.logging import get_logger
from vecstore.providers.embedding.base import EmbeddingProvider, EmbeddingResponse

logger = get_logger(__name__)

DEFAULT_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider using OpenAI API.

    Supports text-embedding-3-small, text-embedding-3-large, and text-embedding-ada-002.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        dimensions: int | None = None,
        timeout: float = 60.0,
    ):
        """Initialize OpenAI embedding provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Model identifier
            dimensions: Output embedding dimensions (only for text-embedding-3-* models)
            timeout: Request timeout in seconds
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self._model = model
        self._timeout = timeout
        self._client = AsyncOpenAI(api_key=self._api_key, timeout=timeout)
        self._dimensions = dimensions or DEFAULT_DIMENSIONS.get(model, 1536)

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "openai"

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions."""
        return self._dimensions

    async def embed(
        self,
        texts: list[str],
        *,
        model: str | None = None,
        dimensions: int | None = None,
        **kwargs: Any,
    ) -> EmbeddingResponse:
        """Generate embeddings using OpenAI API.

        Raises:
            EmbeddingProviderError: If the API call fails
        """
        use_model = model or self._model
        use_dimensions = dimensions or self._dimensions

        logger.debug(
            "openai_embed_request",
            model=use_model,
            dimensions=use_dimensions,
            num_texts=len(texts),
        )

        api_kwargs: dict[str, Any] = {
            "input": texts,
            "model": use_model,
        }

        # Only text-embedding-3-* accepts a dimensions parameter
        if use_model.startswith("text-embedding-3-"):
            api_kwargs["dimensions"] = use_dimensions

        api_kwargs.update(kwargs)

        try:
            response = await self._client.embeddings.create(**api_kwargs)
        except OpenAIError as e:
            logger.error(
                "openai_embed_error",
                model=use_model,
                error=str(e),
            )
            raise EmbeddingProviderError(f"OpenAI API error: {e}", cause=e) from e

        embeddings = [item.embedding for item in response.data]

        usage = None
        if response.usage:
            usage = {
                "total_tokens": response.usage.total_tokens,
                "prompt_tokens": response.usage.prompt_tokens,
            }

        logger.debug(
            "openai_embed_success",
            model=use_model,
            num_embeddings=len(embeddings),
        )

        return EmbeddingResponse(
            embeddings=embeddings,
            model=use_model,
            dimensions=use_dimensions,
            usage=usage,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.close()

    async def __aenter__(self) -> "OpenAIEmbeddingProvider":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
