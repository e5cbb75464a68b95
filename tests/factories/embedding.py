"""Test doubles for embedding providers."""

from typing import Any

from vecstore.providers.embedding.base import EmbeddingProvider, EmbeddingResponse


class StubEmbeddingProvider(EmbeddingProvider):
    """Embedding provider returning scripted vectors.

    ``document_vectors`` is returned verbatim from every embed_documents
    call (so tests can script count mismatches). Queries look up
    ``query_vectors`` and fall back to a unit vector on the first axis.
    """

    def __init__(
        self,
        dimensions: int = 2,
        document_vectors: list[list[float]] | None = None,
        query_vectors: dict[str, list[float]] | None = None,
        error: Exception | None = None,
    ):
        self._dimensions = dimensions
        self.document_vectors = document_vectors
        self.query_vectors = dict(query_vectors or {})
        self.error = error
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    @property
    def provider_name(self) -> str:
        return "stub"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _default_vector(self) -> list[float]:
        return [1.0] + [0.0] * (self._dimensions - 1)

    async def embed(
        self,
        texts: list[str],
        *,
        model: str | None = None,
        **kwargs: Any,
    ) -> EmbeddingResponse:
        return EmbeddingResponse(
            embeddings=[self._default_vector() for _ in texts],
            model=model or "stub",
            dimensions=self._dimensions,
        )

    async def embed_documents(self, texts: list[str], **kwargs: Any) -> list[list[float]]:
        self.document_calls.append(list(texts))
        if self.error is not None:
            raise self.error
        if self.document_vectors is not None:
            return [list(vector) for vector in self.document_vectors]
        return [self._default_vector() for _ in texts]

    async def embed_query(self, text: str, **kwargs: Any) -> list[float]:
        self.query_calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.query_vectors.get(text, self._default_vector()))
