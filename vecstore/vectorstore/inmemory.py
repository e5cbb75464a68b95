"""In-memory vector store implementation for testing.

This module provides a VectorStore implementation that keeps rows in
Python data structures and uses numpy for distance calculations. It
follows the pgvector store's contract: same option validation, same
namespace rule, raw distances as scores, all-or-nothing batches.

Use this implementation for:
- Unit tests
- Development without a database
"""

import json
from typing import Any
from uuid import UUID, uuid4

import numpy as np

from vecstore.errors import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingCountMismatchError,
    InvalidOptionError,
    UnsupportedOptionError,
    VectorStoreError,
)
from vecstore.observability.logging import get_logger
from vecstore.providers.embedding.base import EmbeddingProvider
from vecstore.vectorstore.base import (
    DistanceFunction,
    Document,
    VecStoreOptions,
    VectorStore,
)
from vecstore.vectorstore.options import (
    check_threshold_metric,
    resolve_embedder,
    resolve_query_context,
)

logger = get_logger(__name__)


class InMemoryVectorStore(VectorStore):
    """In-memory vector store for testing and development.

    Not safe for use from multiple threads.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        *,
        collection_name: str = "default",
        collection_metadata: dict[str, Any] | None = None,
        vector_dimensions: int = 1536,
        distance_function: DistanceFunction = DistanceFunction.COSINE,
    ):
        """Initialize in-memory store.

        Args:
            embedder: Default embedding provider
            collection_name: Collection name, also the namespace rows are written to
            collection_metadata: Metadata kept for the collection
            vector_dimensions: Length of every stored vector
            distance_function: Metric searches rank by
        """
        if not collection_name:
            raise ConfigurationError("collection_name must not be empty")
        if vector_dimensions <= 0:
            raise ConfigurationError(
                f"vector_dimensions must be positive, got {vector_dimensions}"
            )

        self._embedder = embedder
        self._collection_name = collection_name
        self._collection_metadata = dict(collection_metadata or {})
        self._vector_dimensions = vector_dimensions
        self._distance_function = distance_function
        self._collection_uuid: UUID | None = None
        self._rows: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "inmemory"

    @property
    def collection_uuid(self) -> UUID | None:
        return self._collection_uuid

    @property
    def row_count(self) -> int:
        """Number of stored rows across all namespaces."""
        return len(self._rows)

    def _distance(self, stored: np.ndarray, query: np.ndarray) -> float:
        if self._distance_function == DistanceFunction.L2:
            return float(np.linalg.norm(stored - query))

        if self._distance_function == DistanceFunction.INNER_PRODUCT:
            return float(-np.dot(stored, query))

        norm = np.linalg.norm(stored) * np.linalg.norm(query)
        if norm == 0:
            return 1.0
        return float(1.0 - np.dot(stored, query) / norm)

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        for position, vector in enumerate(vectors):
            if len(vector) != self._vector_dimensions:
                raise DimensionMismatchError(
                    f"Vector at position {position} has {len(vector)} dimensions, "
                    f"collection expects {self._vector_dimensions}"
                )

    async def initialize(self) -> None:
        """Register the collection."""
        if self._collection_uuid is None:
            self._collection_uuid = uuid4()

    async def add_documents(
        self,
        documents: list[Document],
        options: VecStoreOptions | None = None,
    ) -> list[str]:
        """Embed documents and store them all, or none on failure."""
        options = options or VecStoreOptions()
        if (
            options.score_threshold is not None
            or options.filters is not None
            or options.namespace is not None
        ):
            raise UnsupportedOptionError(
                "score_threshold, filters and namespace are not supported when adding documents"
            )

        if not documents:
            return []

        embedder = resolve_embedder(options, self._embedder)
        vectors = await embedder.embed_documents([doc.page_content for doc in documents])

        if len(vectors) != len(documents):
            raise EmbeddingCountMismatchError(
                f"Embedder returned {len(vectors)} vectors for {len(documents)} documents"
            )
        self._check_dimensions(vectors)

        await self.initialize()

        batch = []
        for doc, vector in zip(documents, vectors):
            try:
                # Round-trip through JSON so stored metadata matches what pgvector returns
                metadata = json.loads(json.dumps(doc.metadata))
            except (TypeError, ValueError) as e:
                raise VectorStoreError(
                    f"Document metadata is not JSON serializable: {e}", cause=e
                ) from e
            batch.append({
                "uuid": uuid4(),
                "document": doc.page_content,
                "embedding": np.asarray(vector, dtype=np.float32),
                "metadata": metadata,
                "collection_id": self._collection_uuid,
                "namespace": self._collection_name,
            })

        self._rows.extend(batch)
        return [str(row["uuid"]) for row in batch]

    async def similarity_search(
        self,
        query: str,
        limit: int,
        options: VecStoreOptions | None = None,
    ) -> list[Document]:
        """Rank rows of the resolved namespace by ascending distance."""
        context = resolve_query_context(
            options,
            default_namespace=self._collection_name,
            default_embedder=self._embedder,
        )
        check_threshold_metric(context.score_threshold, self._distance_function)
        if limit < 0:
            raise InvalidOptionError(f"limit must not be negative, got {limit}")
        if limit == 0:
            return []

        query_vector = await context.embedder.embed_query(query)
        self._check_dimensions([query_vector])
        query_array = np.asarray(query_vector, dtype=np.float32)
        max_distance = 1.0 - context.score_threshold

        scored: list[tuple[float, dict[str, Any]]] = []
        for row in self._rows:
            if row["namespace"] != context.namespace:
                continue
            if not context.filters.matches(row["metadata"]):
                continue
            distance = self._distance(row["embedding"], query_array)
            if context.score_threshold > 0 and distance > max_distance:
                continue
            scored.append((distance, row))

        scored.sort(key=lambda item: item[0])

        return [
            Document(
                page_content=row["document"],
                metadata={**row["metadata"], "namespace": row["namespace"]},
                score=distance,
            )
            for distance, row in scored[:limit]
        ]

    async def drop_tables(self) -> None:
        """Discard every stored row and the collection record."""
        self._rows.clear()
        self._collection_uuid = None

    async def remove_collection(self) -> None:
        """Forget the collection and its rows."""
        if self._collection_uuid is None:
            return
        collection_id = self._collection_uuid
        self._rows = [row for row in self._rows if row["collection_id"] != collection_id]
        self._collection_uuid = None
        logger.debug("inmemory_collection_removed", collection=self._collection_name)
