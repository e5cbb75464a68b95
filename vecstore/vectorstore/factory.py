"""VectorStore factory for creating backend instances.

This module provides a factory function to create the appropriate
VectorStore implementation based on configuration.

The PostgreSQL DSN is read from VECSTORE_DATABASE_URL or DATABASE_URL
unless the storage.postgres section sets one.
"""

from vecstore.config.models.storage import StorageConfig
from vecstore.db.pool import PostgresPool
from vecstore.observability.logging import get_logger
from vecstore.providers.embedding.base import EmbeddingProvider
from vecstore.vectorstore.base import DistanceFunction, VectorStore
from vecstore.vectorstore.inmemory import InMemoryVectorStore
from vecstore.vectorstore.pgvector import HNSWIndexConfig, PgVectorStore

logger = get_logger(__name__)


def create_vector_store(
    config: StorageConfig,
    embedder: EmbeddingProvider,
    *,
    pool: PostgresPool | None = None,
) -> VectorStore:
    """Create a VectorStore instance based on configuration.

    Args:
        config: Storage configuration from settings
        embedder: Default embedding provider for the store
        pool: Existing pool to hand to a pgvector store; built from config if omitted

    Returns:
        Configured VectorStore instance (not yet initialized)

    Raises:
        ValueError: If backend type is not supported
    """
    vector = config.vector

    if vector.backend == "inmemory":
        logger.info(
            "creating_vector_store",
            backend="inmemory",
            collection=vector.collection_name,
            dimensions=vector.dimensions,
        )
        distance = (
            DistanceFunction(vector.hnsw.distance_function)
            if vector.hnsw
            else DistanceFunction.COSINE
        )
        return InMemoryVectorStore(
            embedder,
            collection_name=vector.collection_name,
            vector_dimensions=vector.dimensions,
            distance_function=distance,
        )

    if vector.backend == "pgvector":
        hnsw_index = None
        if vector.hnsw is not None:
            hnsw_index = HNSWIndexConfig(
                m=vector.hnsw.m,
                ef_construction=vector.hnsw.ef_construction,
                distance_function=DistanceFunction(vector.hnsw.distance_function),
            )

        logger.info(
            "creating_vector_store",
            backend="pgvector",
            collection=vector.collection_name,
            dimensions=vector.dimensions,
            hnsw=hnsw_index is not None,
        )

        return PgVectorStore(
            pool or PostgresPool.from_config(config.postgres),
            embedder,
            collection_name=vector.collection_name,
            collection_table_name=vector.collection_table_name,
            embedding_table_name=vector.embedding_table_name,
            vector_dimensions=vector.dimensions,
            pre_delete_collection=vector.pre_delete_collection,
            hnsw_index=hnsw_index,
        )

    raise ValueError(f"Unsupported vector store backend: {vector.backend}")
