"""Bootstrap module for building a vector store from configuration.

Handles:
- Loading configuration from TOML files and VECSTORE_* variables
- Configuring structured logging
- Creating the embedding provider and the vector store

Example usage:

    from vecstore.bootstrap import bootstrap

    store = bootstrap()
    await store.initialize()
    docs = await store.similarity_search("capital of France", limit=4)
"""

from vecstore.config import Settings, get_settings
from vecstore.db.pool import PostgresPool
from vecstore.observability.logging import get_logger, setup_logging
from vecstore.providers.embedding.factory import create_embedding_provider
from vecstore.vectorstore.base import VectorStore
from vecstore.vectorstore.factory import create_vector_store

logger = get_logger(__name__)


def bootstrap(
    settings: Settings | None = None,
    *,
    pool: PostgresPool | None = None,
) -> VectorStore:
    """Build a configured, not yet initialized, vector store.

    Args:
        settings: Settings to use (default: get_settings())
        pool: Existing pool for a pgvector store

    Raises:
        ValueError: If the configured dimensions of the embedder and store differ
    """
    settings = settings or get_settings()

    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_secrets=log_config.redact_secrets,
    )

    embedding_config = settings.providers.embedding
    vector_config = settings.storage.vector
    if embedding_config.dimensions != vector_config.dimensions:
        raise ValueError(
            f"Embedding dimensions ({embedding_config.dimensions}) do not match "
            f"vector store dimensions ({vector_config.dimensions})"
        )

    embedder = create_embedding_provider(embedding_config)
    store = create_vector_store(settings.storage, embedder, pool=pool)

    logger.info(
        "vecstore_bootstrapped",
        backend=vector_config.backend,
        provider=embedding_config.provider,
        collection=vector_config.collection_name,
    )
    return store
