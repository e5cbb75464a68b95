"""Test factories and doubles."""

from tests.factories.embedding import StubEmbeddingProvider

__all__ = ["StubEmbeddingProvider"]
