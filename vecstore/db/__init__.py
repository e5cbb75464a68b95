"""PostgreSQL connection management."""

from vecstore.db.pool import PostgresPool

__all__ = ["PostgresPool"]
