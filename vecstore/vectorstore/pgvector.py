"""PostgreSQL with pgvector extension for vector storage.

Each store binds one collection to a pair of tables:

- a collection table holding one row per collection (uuid, name, cmetadata)
- an embedding table holding documents, their vectors, JSONB metadata,
  the owning collection's uuid and a namespace

Searches rank by ascending pgvector distance. The raw distance is returned
as the document score, so lower scores are better.

Reads run at the server's default READ COMMITTED isolation: a search that
starts before a concurrent insert commits may not see the new rows.
"""

import json
import re
from typing import Any
from uuid import UUID, uuid4

import asyncpg
from pydantic import BaseModel, Field

from vecstore.db.pool import PostgresPool
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

# Unquoted PostgreSQL identifier, at most 63 bytes
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")

DEFAULT_COLLECTION_TABLE = "langchain_pg_collection"
DEFAULT_EMBEDDING_TABLE = "langchain_pg_embedding"


class HNSWIndexConfig(BaseModel):
    """HNSW index parameters used when the embedding table is created."""

    m: int = Field(default=16, gt=0, description="Max connections per graph layer")
    ef_construction: int = Field(
        default=64,
        gt=0,
        description="Candidate list size while building the index",
    )
    distance_function: DistanceFunction = Field(
        default=DistanceFunction.COSINE,
        description="Metric the index is built for and searches rank by",
    )


def _validate_identifier(value: str, field: str) -> str:
    if not IDENTIFIER_PATTERN.match(value):
        raise ConfigurationError(f"{field} must be a plain SQL identifier, got {value!r}")
    return value


def _vector_literal(vector: list[float]) -> str:
    """Format a vector in pgvector's text input format."""
    return str([float(x) for x in vector])


def _load_metadata(raw: str | dict[str, Any] | None) -> dict[str, Any]:
    # JSONB comes back as text unless a codec is registered on the connection
    if raw is None:
        return {}
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


class PgVectorStore(VectorStore):
    """Vector store implementation using PostgreSQL with pgvector.

    Usage:
        store = PgVectorStore(pool, embedder, collection_name="docs", vector_dimensions=1536)
        await store.initialize()
        ids = await store.add_documents([Document(page_content="...")])
        docs = await store.similarity_search("question", limit=4)
    """

    def __init__(
        self,
        pool: PostgresPool,
        embedder: EmbeddingProvider,
        *,
        collection_name: str = "default",
        collection_metadata: dict[str, Any] | None = None,
        collection_table_name: str = DEFAULT_COLLECTION_TABLE,
        embedding_table_name: str = DEFAULT_EMBEDDING_TABLE,
        vector_dimensions: int = 1536,
        pre_delete_collection: bool = False,
        hnsw_index: HNSWIndexConfig | None = None,
    ) -> None:
        """Initialize pgvector store.

        Args:
            pool: PostgreSQL connection pool, owned by the store from here on
            embedder: Default embedding provider
            collection_name: Collection name, also the namespace rows are written to
            collection_metadata: Metadata stored on the collection row
            collection_table_name: Table holding collection rows
            embedding_table_name: Table holding embedded documents
            vector_dimensions: Length of every stored vector
            pre_delete_collection: Drop both tables on the first initialize(), before
                any other setup; lazy setup from add_documents never drops
            hnsw_index: HNSW index settings; also selects the distance metric

        Raises:
            ConfigurationError: On invalid table names, dimensions or collection name
        """
        if not collection_name:
            raise ConfigurationError("collection_name must not be empty")
        if vector_dimensions <= 0:
            raise ConfigurationError(
                f"vector_dimensions must be positive, got {vector_dimensions}"
            )

        self._pool = pool
        self._embedder = embedder
        self._collection_name = collection_name
        self._collection_metadata = dict(collection_metadata or {})
        self._collection_table = _validate_identifier(
            collection_table_name, "collection_table_name"
        )
        self._embedding_table = _validate_identifier(
            embedding_table_name, "embedding_table_name"
        )
        self._vector_dimensions = vector_dimensions
        # Cleared by the first collection setup, so the drop runs at most once
        self._pending_pre_delete = pre_delete_collection
        self._hnsw_index = hnsw_index
        self._collection_uuid: UUID | None = None

        logger.info(
            "pgvector_store_initialized",
            collection=collection_name,
            embedding_table=embedding_table_name,
            dimensions=vector_dimensions,
            distance=self.distance_function.value,
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "pgvector"

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def collection_uuid(self) -> UUID | None:
        """Uuid of the collection row, None until initialize() has run."""
        return self._collection_uuid

    @property
    def collection_metadata(self) -> dict[str, Any]:
        return dict(self._collection_metadata)

    @property
    def vector_dimensions(self) -> int:
        return self._vector_dimensions

    @property
    def distance_function(self) -> DistanceFunction:
        if self._hnsw_index is None:
            return DistanceFunction.COSINE
        return self._hnsw_index.distance_function

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        for position, vector in enumerate(vectors):
            if len(vector) != self._vector_dimensions:
                raise DimensionMismatchError(
                    f"Vector at position {position} has {len(vector)} dimensions, "
                    f"collection expects {self._vector_dimensions}"
                )

    # =========================================================================
    # COLLECTION MANAGEMENT
    # =========================================================================

    async def initialize(self) -> None:
        """Create tables and indexes if missing and register the collection.

        Drops existing tables first when ``pre_delete_collection`` is set,
        on the first call only. Re-running against an existing collection
        keeps its uuid and replaces its metadata.
        """
        if self._pending_pre_delete:
            self._pending_pre_delete = False
            await self.drop_tables()

        await self._ensure_collection()

    async def _ensure_collection(self) -> None:
        """Create missing tables and indexes, then upsert the collection row."""
        collection_table = self._collection_table
        embedding_table = self._embedding_table

        async with self._pool.acquire() as conn:
            await conn.execute("CREATE EXTENSION IF NOT EXISTS vector")

            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {collection_table} (
                    uuid UUID PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    cmetadata JSONB
                )
                """
            )

            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {embedding_table} (
                    uuid UUID PRIMARY KEY,
                    collection_id UUID REFERENCES {collection_table}(uuid) ON DELETE CASCADE,
                    embedding vector({self._vector_dimensions}) NOT NULL,
                    document TEXT,
                    cmetadata JSONB,
                    namespace TEXT NOT NULL
                )
                """
            )

            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS {embedding_table}_namespace_idx "
                f"ON {embedding_table}(namespace)"
            )

            if self._hnsw_index is not None:
                index = self._hnsw_index
                await conn.execute(
                    f"""
                    CREATE INDEX IF NOT EXISTS {embedding_table}_embedding_hnsw_idx
                    ON {embedding_table}
                    USING hnsw (embedding {index.distance_function.index_ops})
                    WITH (m = {index.m}, ef_construction = {index.ef_construction})
                    """
                )

            row = await conn.fetchrow(
                f"""
                INSERT INTO {collection_table} (uuid, name, cmetadata)
                VALUES ($1, $2, $3::jsonb)
                ON CONFLICT (name) DO UPDATE SET cmetadata = EXCLUDED.cmetadata
                RETURNING uuid
                """,
                uuid4(),
                self._collection_name,
                json.dumps(self._collection_metadata),
            )

        self._collection_uuid = row["uuid"]
        self._pending_pre_delete = False

        logger.info(
            "pgvector_collection_ready",
            collection=self._collection_name,
            collection_uuid=str(self._collection_uuid),
            hnsw=self._hnsw_index is not None,
        )

    async def drop_tables(self) -> None:
        """Drop the embedding table, then the collection table, if they exist."""
        async with self._pool.acquire() as conn:
            await conn.execute(f"DROP TABLE IF EXISTS {self._embedding_table}")
            await conn.execute(f"DROP TABLE IF EXISTS {self._collection_table}")

        self._collection_uuid = None
        logger.info(
            "pgvector_tables_dropped",
            embedding_table=self._embedding_table,
            collection_table=self._collection_table,
        )

    async def remove_collection(self) -> None:
        """Delete this store's collection row.

        Embedded rows go with it through the foreign key cascade. A store
        that never registered its collection, or whose tables are already
        gone, has nothing to remove.
        """
        if self._collection_uuid is None:
            return

        async with self._pool.acquire() as conn:
            try:
                await conn.execute(
                    f"DELETE FROM {self._collection_table} WHERE uuid = $1",
                    self._collection_uuid,
                )
            except asyncpg.UndefinedTableError:
                logger.debug(
                    "pgvector_remove_collection_missing_table",
                    collection_table=self._collection_table,
                )

        logger.info(
            "pgvector_collection_removed",
            collection=self._collection_name,
            collection_uuid=str(self._collection_uuid),
        )
        self._collection_uuid = None

    # =========================================================================
    # DOCUMENTS
    # =========================================================================

    async def add_documents(
        self,
        documents: list[Document],
        options: VecStoreOptions | None = None,
    ) -> list[str]:
        """Embed documents and insert them in a single transaction.

        Raises:
            UnsupportedOptionError: If namespace, filters or score_threshold are set
            EmbeddingCountMismatchError: If the embedder returns the wrong number of vectors
            DimensionMismatchError: If any vector has the wrong length
            BackendError: If any insert fails; nothing from the batch is kept
        """
        options = options or VecStoreOptions()
        if (
            options.score_threshold is not None
            or options.filters is not None
            or options.namespace is not None
        ):
            raise UnsupportedOptionError(
                "score_threshold, filters and namespace are not supported "
                "when adding documents to pgvector"
            )

        if not documents:
            return []

        embedder = resolve_embedder(options, self._embedder)
        vectors = await embedder.embed_documents([doc.page_content for doc in documents])

        if len(vectors) != len(documents):
            logger.error(
                "pgvector_embedding_count_mismatch",
                documents=len(documents),
                vectors=len(vectors),
            )
            raise EmbeddingCountMismatchError(
                f"Embedder returned {len(vectors)} vectors for {len(documents)} documents"
            )
        self._check_dimensions(vectors)

        try:
            metadata = [json.dumps(doc.metadata) for doc in documents]
        except (TypeError, ValueError) as e:
            raise VectorStoreError(f"Document metadata is not JSON serializable: {e}", cause=e) from e

        # Lazy setup never drops tables, even on a pre-delete store
        if self._collection_uuid is None:
            await self._ensure_collection()

        ids = [uuid4() for _ in documents]
        rows = [
            (
                row_id,
                doc.page_content,
                _vector_literal(vector),
                doc_metadata,
                self._collection_uuid,
                self._collection_name,
            )
            for row_id, doc, vector, doc_metadata in zip(ids, documents, vectors, metadata)
        ]

        async with self._pool.transaction() as conn:
            await conn.executemany(
                f"""
                INSERT INTO {self._embedding_table}
                    (uuid, document, embedding, cmetadata, collection_id, namespace)
                VALUES ($1, $2, $3::vector, $4::jsonb, $5, $6)
                """,
                rows,
            )

        logger.debug(
            "pgvector_add_documents_success",
            table=self._embedding_table,
            count=len(ids),
        )

        return [str(row_id) for row_id in ids]

    async def similarity_search(
        self,
        query: str,
        limit: int,
        options: VecStoreOptions | None = None,
    ) -> list[Document]:
        """Return up to ``limit`` documents ordered by ascending distance.

        Searching never creates tables. A store whose embedding table does
        not exist yet returns no documents.

        Raises:
            InvalidFilterShapeError: If filters are not a flat object of scalars
            InvalidScoreThresholdError: If the threshold is outside [0, 1]
            UnsupportedOptionError: If a threshold is set on a non-cosine metric
            InvalidOptionError: If limit is negative
            BackendError: If the query fails
        """
        context = resolve_query_context(
            options,
            default_namespace=self._collection_name,
            default_embedder=self._embedder,
        )
        check_threshold_metric(context.score_threshold, self.distance_function)
        if limit < 0:
            raise InvalidOptionError(f"limit must not be negative, got {limit}")
        if limit == 0:
            return []

        query_vector = await context.embedder.embed_query(query)
        self._check_dimensions([query_vector])

        distance_expr = f"(embedding {self.distance_function.operator} $1::vector)"
        conditions = ["namespace = $2"]
        params: list[Any] = [_vector_literal(query_vector), context.namespace]

        if not context.filters.is_empty:
            params.append(json.dumps(context.filters.conditions))
            conditions.append(f"cmetadata @> ${len(params)}::jsonb")

        if context.score_threshold > 0:
            params.append(1.0 - context.score_threshold)
            conditions.append(f"{distance_expr} <= ${len(params)}")

        params.append(limit)
        where_clause = " AND ".join(conditions)

        sql = f"""
            SELECT document, cmetadata, namespace, {distance_expr} AS distance
            FROM {self._embedding_table}
            WHERE {where_clause}
            ORDER BY {distance_expr} ASC
            LIMIT ${len(params)}
        """

        async with self._pool.acquire() as conn:
            try:
                rows = await conn.fetch(sql, *params)
            except asyncpg.UndefinedTableError:
                # Nothing has been stored yet
                logger.debug(
                    "pgvector_search_missing_table",
                    embedding_table=self._embedding_table,
                )
                rows = []

        documents = []
        for row in rows:
            metadata = _load_metadata(row["cmetadata"])
            metadata["namespace"] = row["namespace"]
            documents.append(
                Document(
                    page_content=row["document"] or "",
                    metadata=metadata,
                    score=float(row["distance"]),
                )
            )

        logger.debug(
            "pgvector_search_success",
            table=self._embedding_table,
            namespace=context.namespace,
            results=len(documents),
            score_threshold=context.score_threshold,
        )

        return documents

    async def close(self) -> None:
        """Close the store's connection pool."""
        await self._pool.close()
