"""Error hierarchy for vector stores and their collaborators.

Every store implementation raises these errors so callers can handle
failures uniformly regardless of backend.
"""


class VectorStoreError(Exception):
    """Base exception for all vecstore errors.

    Backend- and provider-specific exceptions are wrapped in one of the
    subclasses below, with the original kept on ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(VectorStoreError):
    """Raised when a store is constructed with invalid configuration.

    Examples:
        - Table name that is not a plain SQL identifier
        - Non-positive vector dimensions
    """

    pass


class InvalidOptionError(VectorStoreError):
    """Raised when per-call options fail validation."""

    pass


class InvalidFilterShapeError(InvalidOptionError):
    """Raised when metadata filters are not a flat key -> scalar mapping."""

    pass


class InvalidScoreThresholdError(InvalidOptionError):
    """Raised when a score threshold falls outside [0.0, 1.0]."""

    pass


class UnsupportedOptionError(InvalidOptionError):
    """Raised when an option is set on an operation that does not accept it."""

    pass


class EmbeddingError(VectorStoreError):
    """Base for failures producing or validating embeddings."""

    pass


class EmbeddingCountMismatchError(EmbeddingError):
    """Raised when the provider returns a different number of vectors than texts."""

    pass


class DimensionMismatchError(EmbeddingError):
    """Raised when a vector's length differs from the collection's dimensions."""

    pass


class EmbeddingProviderError(EmbeddingError):
    """Raised by embedding providers when the upstream API call fails."""

    pass


class BackendError(VectorStoreError):
    """Raised when the relational backend rejects a query or transaction.

    Any open transaction has already been rolled back when this is raised.
    """

    pass


class ConnectionError(BackendError):
    """Raised when a connection to the backend cannot be established.

    Examples:
        - Database connection timeout
        - Authentication failure
        - Network errors
    """

    pass


class ToolError(VectorStoreError):
    """Raised when an external tool call fails or yields no result."""

    pass
