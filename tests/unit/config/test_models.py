"""Unit tests for configuration Pydantic models."""

import pytest
from pydantic import ValidationError

from vecstore.config.models import (
    EmbeddingProviderConfig,
    HNSWConfig,
    LoggingConfig,
    PostgresConfig,
    VectorStoreConfig,
)


class TestPostgresConfig:
    """Tests for PostgresConfig model."""

    def test_defaults(self) -> None:
        config = PostgresConfig()
        assert config.connection_url is None
        assert config.min_pool_size == 5
        assert config.max_pool_size == 20

    def test_pool_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PostgresConfig(max_pool_size=0)


class TestHNSWConfig:
    """Tests for HNSWConfig model."""

    def test_defaults(self) -> None:
        config = HNSWConfig()
        assert config.m == 16
        assert config.ef_construction == 64
        assert config.distance_function == "cosine"

    def test_unknown_distance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HNSWConfig(distance_function="manhattan")


class TestVectorStoreConfig:
    """Tests for VectorStoreConfig model."""

    def test_dimensions_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            VectorStoreConfig(dimensions=0)

    def test_collection_name_required(self) -> None:
        with pytest.raises(ValidationError):
            VectorStoreConfig(collection_name="")

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VectorStoreConfig(backend="qdrant")


class TestEmbeddingProviderConfig:
    """Tests for EmbeddingProviderConfig model."""

    def test_api_key_hidden(self) -> None:
        config = EmbeddingProviderConfig(api_key="sk-secret")
        assert "sk-secret" not in str(config)
        assert config.api_key.get_secret_value() == "sk-secret"

    def test_unknown_provider_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbeddingProviderConfig(provider="cohere")


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "json"
        assert config.redact_secrets is True

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")
