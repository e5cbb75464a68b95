"""EmbeddingProvider factory for creating provider instances from configuration.

API keys are read from the config section when set, otherwise from
the OPENAI_API_KEY environment variable.
"""

from vecstore.config.models.providers import EmbeddingProviderConfig
from vecstore.observability.logging import get_logger
from vecstore.providers.embedding.base import EmbeddingProvider
from vecstore.providers.embedding.mock import MockEmbeddingProvider
from vecstore.providers.embedding.openai import OpenAIEmbeddingProvider

logger = get_logger(__name__)


def create_embedding_provider(config: EmbeddingProviderConfig) -> EmbeddingProvider:
    """Create an EmbeddingProvider based on configuration.

    Raises:
        ValueError: If the provider type is not supported
    """
    api_key = config.api_key.get_secret_value() if config.api_key else None

    logger.info(
        "creating_embedding_provider",
        provider=config.provider,
        model=config.model,
        dimensions=config.dimensions,
    )

    if config.provider == "mock":
        return MockEmbeddingProvider(dimensions=config.dimensions)

    if config.provider == "openai":
        return OpenAIEmbeddingProvider(
            api_key=api_key,
            model=config.model,
            dimensions=config.dimensions,
            timeout=config.timeout,
        )

    raise ValueError(f"Unsupported embedding provider: {config.provider}")
