"""VectorStore abstract interface.

This module defines the abstract interface for vector storage backends.

The VectorStore is responsible for:
- Embedding and persisting documents atomically per batch
- Distance-ranked similarity search scoped by namespace and metadata
- Managing its collection's lifecycle (create, drop, remove)

Scores are raw distances: lower is more relevant.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vecstore.providers.embedding.base import EmbeddingProvider


class DistanceFunction(str, Enum):
    """Distance metrics supported by pgvector."""

    COSINE = "cosine"
    L2 = "l2"
    INNER_PRODUCT = "inner_product"

    @property
    def operator(self) -> str:
        """pgvector operator computing this distance."""
        return {
            DistanceFunction.COSINE: "<=>",
            DistanceFunction.L2: "<->",
            DistanceFunction.INNER_PRODUCT: "<#>",  # negative inner product
        }[self]

    @property
    def index_ops(self) -> str:
        """pgvector operator class for building an index on this metric."""
        return {
            DistanceFunction.COSINE: "vector_cosine_ops",
            DistanceFunction.L2: "vector_l2_ops",
            DistanceFunction.INNER_PRODUCT: "vector_ip_ops",
        }[self]


class Document(BaseModel):
    """A text document with metadata.

    ``score`` is ignored on insert and holds the raw distance on retrieval.
    """

    page_content: str = Field(..., description="Document text")
    metadata: dict[str, Any] = Field(default_factory=dict, description="JSON-serializable metadata")
    score: float = Field(default=0.0, description="Distance to the query (lower is better)")


class VecStoreOptions(BaseModel):
    """Per-call options for vector store operations.

    ``filters`` is accepted as raw input and validated when the call
    resolves its query context.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    namespace: str | None = Field(default=None, description="Namespace to search in")
    filters: Any = Field(default=None, description="Flat key -> scalar metadata filter")
    score_threshold: float | None = Field(
        default=None,
        description="Cosine relevance bound in [0, 1]; 0 disables score filtering",
    )
    embedder: EmbeddingProvider | None = Field(
        default=None,
        description="Embedder to use instead of the store default for this call",
    )


class VectorStore(ABC):
    """Abstract interface for document storage and similarity search.

    Implementations must ensure:
    - Atomic batches: a failed add_documents leaves no rows behind
    - Namespace isolation: searches only see rows of the resolved namespace
    - Ascending distance order in search results
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'pgvector', 'inmemory')."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Create the collection and its storage if missing."""
        pass

    @abstractmethod
    async def add_documents(
        self,
        documents: list[Document],
        options: VecStoreOptions | None = None,
    ) -> list[str]:
        """Embed and store documents.

        Args:
            documents: Documents to store
            options: Per-call options; only ``embedder`` is accepted

        Returns:
            Generated ids, same length and order as ``documents``
        """
        pass

    @abstractmethod
    async def similarity_search(
        self,
        query: str,
        limit: int,
        options: VecStoreOptions | None = None,
    ) -> list[Document]:
        """Find the documents closest to the query.

        Args:
            query: Query text
            limit: Maximum number of documents to return
            options: Namespace, filters, score threshold, embedder override

        Returns:
            Documents sorted by ascending distance, ``score`` set to the distance
        """
        pass

    @abstractmethod
    async def drop_tables(self) -> None:
        """Remove the collection's storage. Safe to call repeatedly."""
        pass

    @abstractmethod
    async def remove_collection(self) -> None:
        """Delete the collection record. Missing records are ignored."""
        pass

    async def close(self) -> None:
        """Release resources owned by the store."""
        pass
