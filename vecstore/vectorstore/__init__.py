"""Vector storage and similarity search."""

from vecstore.vectorstore.base import (
    DistanceFunction,
    Document,
    VecStoreOptions,
    VectorStore,
)
from vecstore.vectorstore.factory import create_vector_store
from vecstore.vectorstore.inmemory import InMemoryVectorStore
from vecstore.vectorstore.options import (
    MetadataFilter,
    QueryContext,
    check_threshold_metric,
    resolve_embedder,
    resolve_filters,
    resolve_namespace,
    resolve_query_context,
    resolve_score_threshold,
)
from vecstore.vectorstore.pgvector import HNSWIndexConfig, PgVectorStore

__all__ = [
    "DistanceFunction",
    "Document",
    "HNSWIndexConfig",
    "InMemoryVectorStore",
    "MetadataFilter",
    "PgVectorStore",
    "QueryContext",
    "VecStoreOptions",
    "VectorStore",
    "check_threshold_metric",
    "create_vector_store",
    "resolve_embedder",
    "resolve_filters",
    "resolve_namespace",
    "resolve_query_context",
    "resolve_score_threshold",
]
