"""Embedding provider configuration models."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr

EmbeddingProviderType = Literal["openai", "mock"]


class EmbeddingProviderConfig(BaseModel):
    """Configuration for an embedding provider."""

    provider: EmbeddingProviderType = Field(
        default="openai",
        description="Provider type",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Model identifier",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key (prefer env var)",
    )
    dimensions: int = Field(
        default=1536,
        gt=0,
        description="Embedding dimensions",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds",
    )


class ProvidersConfig(BaseModel):
    """Configuration for external AI providers."""

    embedding: EmbeddingProviderConfig = Field(
        default_factory=EmbeddingProviderConfig,
        description="Embedding provider",
    )
