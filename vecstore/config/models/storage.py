"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

VectorBackendType = Literal["inmemory", "pgvector"]
DistanceFunctionName = Literal["cosine", "l2", "inner_product"]


class PostgresConfig(BaseModel):
    """PostgreSQL connection pool configuration.

    Note: the DSN should come from VECSTORE_DATABASE_URL or DATABASE_URL,
    NOT from config files. This keeps passwords out of version control.
    """

    connection_url: str | None = Field(
        default=None,
        description="Connection URL (from env var)",
    )
    min_pool_size: int = Field(
        default=5,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=20,
        gt=0,
        description="Maximum connections in pool",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    command_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class HNSWConfig(BaseModel):
    """HNSW index tuning passed to pgvector at table creation."""

    m: int = Field(default=16, gt=0, description="Max connections per graph layer")
    ef_construction: int = Field(
        default=64,
        gt=0,
        description="Candidate list size while building the index",
    )
    distance_function: DistanceFunctionName = Field(
        default="cosine",
        description="Distance metric the index is built for",
    )


class VectorStoreConfig(BaseModel):
    """Configuration for the vector store backend."""

    backend: VectorBackendType = Field(
        default="pgvector",
        description="Vector store backend type (inmemory, pgvector)",
    )
    collection_name: str = Field(
        default="default",
        min_length=1,
        description="Collection name, also the default namespace",
    )
    collection_table_name: str = Field(
        default="langchain_pg_collection",
        description="Table holding collection rows",
    )
    embedding_table_name: str = Field(
        default="langchain_pg_embedding",
        description="Table holding embedded documents",
    )
    dimensions: int = Field(
        default=1536,
        gt=0,
        description="Vector dimensions (must match embedding provider)",
    )
    pre_delete_collection: bool = Field(
        default=False,
        description="Drop existing tables before initializing the collection",
    )
    hnsw: HNSWConfig | None = Field(
        default=None,
        description="HNSW index settings; no vector index is created when unset",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="PostgreSQL connection pool",
    )
    vector: VectorStoreConfig = Field(
        default_factory=VectorStoreConfig,
        description="VectorStore backend for embeddings",
    )
