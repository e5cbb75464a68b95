"""vecstore: Document embedding storage and similarity search.

A uniform async interface for persisting text documents as embeddings
and retrieving the closest documents to a query, backed by PostgreSQL
with the pgvector extension.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
