"""Integration tests for PgVectorStore.

Tests the store against a real PostgreSQL database with pgvector.
"""

import pytest

from tests.factories.embedding import StubEmbeddingProvider
from vecstore.db.pool import PostgresPool
from vecstore.errors import BackendError
from vecstore.vectorstore import (
    DistanceFunction,
    Document,
    HNSWIndexConfig,
    PgVectorStore,
    VecStoreOptions,
)

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

PARIS = "Paris is the capital of France"
LYON = "Lyon is a city in France"


async def count_rows(pool: PostgresPool, table: str) -> int:
    async with pool.acquire() as conn:
        return await conn.fetchval(f"SELECT count(*) FROM {table}")


@pytest.fixture
def tables(table_suffix: str) -> dict[str, str]:
    return {
        "collection_table_name": f"vs_collection_{table_suffix}",
        "embedding_table_name": f"vs_embedding_{table_suffix}",
    }


@pytest.fixture
async def store(postgres_pool, paris_lyon_embedder, tables):
    store = PgVectorStore(
        postgres_pool,
        paris_lyon_embedder,
        collection_name="cities",
        vector_dimensions=2,
        hnsw_index=HNSWIndexConfig(m=4, ef_construction=8),
        **tables,
    )
    await store.initialize()
    yield store
    await store.drop_tables()


class TestPgVectorStore:
    """Round trips through PostgreSQL."""

    async def test_capital_of_france(self, store):
        ids = await store.add_documents(
            [Document(page_content=PARIS), Document(page_content=LYON)]
        )
        assert len(ids) == 2

        docs = await store.similarity_search("capital of France", 1)

        assert len(docs) == 1
        assert docs[0].page_content == PARIS
        assert docs[0].score == pytest.approx(0.0, abs=1e-6)
        assert docs[0].metadata["namespace"] == "cities"

    async def test_results_ascend_by_distance(self, store):
        await store.add_documents([Document(page_content=LYON), Document(page_content=PARIS)])

        docs = await store.similarity_search("capital of France", 5)

        # Lyon got [1, 0] here since vectors are handed out in batch order
        assert [d.page_content for d in docs] == [LYON, PARIS]
        assert docs[0].score <= docs[1].score

    async def test_threshold_and_filters(self, store):
        await store.add_documents(
            [
                Document(page_content=PARIS, metadata={"kind": "capital"}),
                Document(page_content=LYON, metadata={"kind": "city"}),
            ]
        )

        close = await store.similarity_search(
            "capital of France", 5, VecStoreOptions(score_threshold=0.5)
        )
        assert [d.page_content for d in close] == [PARIS]

        cities = await store.similarity_search(
            "capital of France", 5, VecStoreOptions(filters={"kind": "city"})
        )
        assert [d.page_content for d in cities] == [LYON]
        assert cities[0].metadata == {"kind": "city", "namespace": "cities"}

    async def test_failed_batch_leaves_no_rows(self, store, postgres_pool, tables):
        """A row the database rejects rolls back the whole batch."""
        with pytest.raises(BackendError):
            await store.add_documents(
                [Document(page_content=PARIS), Document(page_content="nul \x00 byte")]
            )

        assert await count_rows(postgres_pool, tables["embedding_table_name"]) == 0

    async def test_namespaces_are_isolated(self, store, postgres_pool, tables):
        other = PgVectorStore(
            postgres_pool,
            StubEmbeddingProvider(dimensions=2),
            collection_name="towns",
            vector_dimensions=2,
            **tables,
        )
        await store.add_documents([Document(page_content=PARIS), Document(page_content=LYON)])
        await other.add_documents([Document(page_content="Annecy")])

        assert [d.page_content for d in await other.similarity_search("q", 10)] == ["Annecy"]
        assert len(await store.similarity_search("capital of France", 10)) == 2
        crossed = await store.similarity_search(
            "capital of France", 10, VecStoreOptions(namespace="towns")
        )
        assert [d.page_content for d in crossed] == ["Annecy"]

    async def test_remove_collection_cascades(self, store, postgres_pool, tables):
        await store.add_documents([Document(page_content=PARIS), Document(page_content=LYON)])

        await store.remove_collection()
        await store.remove_collection()

        assert await count_rows(postgres_pool, tables["embedding_table_name"]) == 0
        assert await count_rows(postgres_pool, tables["collection_table_name"]) == 0

    async def test_pre_delete_store_reinsert_keeps_other_collections(
        self, postgres_pool, paris_lyon_embedder, tables
    ):
        other = PgVectorStore(
            postgres_pool, paris_lyon_embedder, collection_name="towns",
            vector_dimensions=2, **tables,
        )
        store = PgVectorStore(
            postgres_pool, paris_lyon_embedder, collection_name="cities",
            vector_dimensions=2, pre_delete_collection=True, **tables,
        )
        try:
            await store.initialize()
            await other.add_documents([Document(page_content="Annecy")])
            await store.add_documents([Document(page_content=PARIS)])
            await store.remove_collection()
            await store.add_documents([Document(page_content=LYON)])

            towns = await other.similarity_search("q", 10)
        finally:
            await store.drop_tables()

        assert [d.page_content for d in towns] == ["Annecy"]

    async def test_search_before_setup_is_empty(
        self, postgres_pool, paris_lyon_embedder, tables
    ):
        store = PgVectorStore(
            postgres_pool, paris_lyon_embedder, vector_dimensions=2, **tables
        )

        assert await store.similarity_search("capital of France", 3) == []

    async def test_drop_tables_is_idempotent(self, store):
        await store.drop_tables()
        await store.drop_tables()
        assert store.collection_uuid is None

    async def test_initialize_is_repeatable(self, store):
        collection_uuid = store.collection_uuid
        await store.initialize()
        assert store.collection_uuid == collection_uuid

    async def test_inner_product_ranking(self, postgres_pool, tables):
        embedder = StubEmbeddingProvider(
            dimensions=2,
            document_vectors=[[1.0, 1.0], [2.0, 2.0]],
            query_vectors={"q": [1.0, 1.0]},
        )
        store = PgVectorStore(
            postgres_pool,
            embedder,
            collection_name="ip",
            vector_dimensions=2,
            hnsw_index=HNSWIndexConfig(distance_function=DistanceFunction.INNER_PRODUCT),
            **tables,
        )
        try:
            await store.add_documents(
                [Document(page_content="small"), Document(page_content="big")]
            )
            docs = await store.similarity_search("q", 2)
        finally:
            await store.drop_tables()

        assert [d.page_content for d in docs] == ["big", "small"]
        assert docs[0].score == pytest.approx(-4.0)
