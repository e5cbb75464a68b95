"""Validation of per-call vector store options.

Turns raw VecStoreOptions into a QueryContext or fails before any
embedder or backend call is made.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vecstore.errors import (
    InvalidFilterShapeError,
    InvalidScoreThresholdError,
    UnsupportedOptionError,
)
from vecstore.providers.embedding.base import EmbeddingProvider
from vecstore.vectorstore.base import DistanceFunction, VecStoreOptions

Scalar = str | int | float | bool | None

SCALAR_TYPES = (str, int, float, bool, type(None))


class MetadataFilter(BaseModel):
    """Either no filter or a flat mapping of metadata key -> literal value.

    Build with ``MetadataFilter.empty()`` or ``MetadataFilter.flat(...)``;
    every other shape is rejected.
    """

    model_config = ConfigDict(frozen=True)

    conditions: dict[str, Scalar] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "MetadataFilter":
        return cls()

    @classmethod
    def flat(cls, mapping: Mapping[Any, Any]) -> "MetadataFilter":
        """Validate and wrap a flat key -> scalar mapping.

        Raises:
            InvalidFilterShapeError: On non-string keys, nested or sequence values
        """
        conditions: dict[str, Scalar] = {}
        for key, value in mapping.items():
            if not isinstance(key, str):
                raise InvalidFilterShapeError(
                    f"Filter keys must be strings, got {type(key).__name__}"
                )
            if not isinstance(value, SCALAR_TYPES):
                raise InvalidFilterShapeError(
                    f"Filter value for '{key}' must be a scalar, got {type(value).__name__}"
                )
            if isinstance(value, float) and not math.isfinite(value):
                raise InvalidFilterShapeError(f"Filter value for '{key}' must be finite")
            conditions[key] = value
        return cls(conditions=conditions)

    @property
    def is_empty(self) -> bool:
        return not self.conditions

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        """Check that metadata carries every filter key with an equal value."""
        for key, expected in self.conditions.items():
            if key not in metadata:
                return False
            actual = metadata[key]
            # JSON keeps true and 1 apart
            if isinstance(actual, bool) != isinstance(expected, bool):
                return False
            if actual != expected:
                return False
        return True


class QueryContext(BaseModel):
    """Validated options for a single store call."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    namespace: str
    filters: MetadataFilter = Field(default_factory=MetadataFilter.empty)
    score_threshold: float = 0.0
    embedder: EmbeddingProvider


def resolve_filters(options: VecStoreOptions) -> MetadataFilter:
    """Return the metadata filter, empty when none was given.

    Raises:
        InvalidFilterShapeError: If filters are not a flat object of scalars
    """
    raw = options.filters
    if raw is None:
        return MetadataFilter.empty()
    if isinstance(raw, MetadataFilter):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidFilterShapeError(
            f"Filters must be a flat object of scalars, got {type(raw).__name__}"
        )
    return MetadataFilter.flat(raw)


def resolve_namespace(options: VecStoreOptions, default: str) -> str:
    """Return the requested namespace, or ``default`` when unset or empty."""
    return options.namespace or default


def resolve_score_threshold(options: VecStoreOptions) -> float:
    """Return the score threshold, 0.0 when unset.

    Raises:
        InvalidScoreThresholdError: If the threshold is outside [0.0, 1.0]
    """
    threshold = options.score_threshold
    if threshold is None:
        return 0.0
    if not 0.0 <= threshold <= 1.0:
        raise InvalidScoreThresholdError(
            f"Score threshold must be between 0.0 and 1.0, got {threshold}"
        )
    return float(threshold)


def resolve_embedder(options: VecStoreOptions, default: EmbeddingProvider) -> EmbeddingProvider:
    """Return the per-call embedder override, or the store's embedder."""
    if options.embedder is not None:
        return options.embedder
    return default


def resolve_query_context(
    options: VecStoreOptions | None,
    *,
    default_namespace: str,
    default_embedder: EmbeddingProvider,
) -> QueryContext:
    """Validate options into a QueryContext."""
    options = options or VecStoreOptions()
    return QueryContext(
        namespace=resolve_namespace(options, default_namespace),
        filters=resolve_filters(options),
        score_threshold=resolve_score_threshold(options),
        embedder=resolve_embedder(options, default_embedder),
    )


def check_threshold_metric(score_threshold: float, distance_function: DistanceFunction) -> None:
    """Reject a score threshold on metrics it is not scaled for.

    The threshold bounds cosine distance to ``1 - score_threshold``. L2 and
    negative inner product distances have no such range.

    Raises:
        UnsupportedOptionError: If a non-zero threshold meets a non-cosine metric
    """
    if score_threshold > 0 and distance_function != DistanceFunction.COSINE:
        raise UnsupportedOptionError(
            f"score_threshold is only supported with cosine distance, "
            f"not {distance_function.value}"
        )
