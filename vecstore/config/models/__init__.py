"""Configuration models."""

from vecstore.config.models.observability import LoggingConfig, ObservabilityConfig
from vecstore.config.models.providers import EmbeddingProviderConfig, ProvidersConfig
from vecstore.config.models.storage import (
    HNSWConfig,
    PostgresConfig,
    StorageConfig,
    VectorStoreConfig,
)

__all__ = [
    "EmbeddingProviderConfig",
    "HNSWConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "ProvidersConfig",
    "StorageConfig",
    "VectorStoreConfig",
]
