"""Embedding providers for text vectorization."""

from vecstore.providers.embedding.base import EmbeddingProvider, EmbeddingResponse
from vecstore.providers.embedding.factory import create_embedding_provider
from vecstore.providers.embedding.mock import MockEmbeddingProvider
from vecstore.providers.embedding.openai import OpenAIEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "EmbeddingResponse",
    "MockEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "create_embedding_provider",
]
