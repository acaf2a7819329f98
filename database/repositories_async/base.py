"""Base repository with async PostgreSQL connection pooling

All repositories inherit from BaseRepository and share:
- Connection pool (no connection per-instance)
- Query execution helpers that translate driver errors into DatabaseError
- Logging infrastructure

Return Type Conventions
-----------------------
All repository methods follow these patterns for consistency:

    get_X(id) -> Optional[T]
        Single entity lookup by primary key.
        Returns None if entity not found.

    get_Xs(...) -> List[T]
        Multiple entity retrieval with filters.
        Returns empty list [] if none match.

    count_by_X() -> Dict[str, int]
        Aggregate counts keyed by the grouping column.

Connection Patterns
-------------------
    self._connection()
        Pooled connection with driver errors translated. Each
        statement autocommits; every write here is a single statement.
"""

import asyncpg
from typing import Any, List, Optional
from contextlib import asynccontextmanager

from config import get_logger
from exceptions import DatabaseConnectionError, DatabaseError, DataIntegrityError

logger = get_logger(__name__).bind(component="repository")


class BaseRepository:
    """Base class for async PostgreSQL repositories

    Provides connection pool management and query execution helpers.
    All subclasses share the same connection pool for efficiency.

    Design Principles:
    - Pool is passed in, not created (singleton pattern)
    - Queries use $1, $2 placeholders (PostgreSQL parameterization)
    - All methods are async (no sync fallbacks)
    """

    def __init__(self, pool: asyncpg.Pool):
        """Initialize repository with shared connection pool

        Args:
            pool: asyncpg connection pool (shared across all repositories)
        """
        self.pool = pool

    @asynccontextmanager
    async def _connection(self):
        """Acquire a pooled connection, translating driver errors

        Raises:
            DataIntegrityError: Unique or check constraint violation
            DatabaseConnectionError: Pool or socket failure
            DatabaseError: Any other PostgreSQL error
        """
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except asyncpg.IntegrityConstraintViolationError as e:
            raise DataIntegrityError(
                f"Constraint violation: {e}",
                constraint=getattr(e, "constraint_name", None),
            ) from e
        except (asyncpg.InterfaceError, OSError) as e:
            logger.error("database connection failed", error=str(e))
            raise DatabaseConnectionError(f"Database connection failed: {e}") from e
        except asyncpg.PostgresError as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    async def _fetchrow(self, query: str, *args: Any) -> Optional[asyncpg.Record]:
        """Execute query and fetch single row"""
        async with self._connection() as conn:
            return await conn.fetchrow(query, *args)

    async def _fetch(self, query: str, *args: Any) -> List[asyncpg.Record]:
        """Execute query and fetch all rows"""
        async with self._connection() as conn:
            return await conn.fetch(query, *args)

    async def _execute(self, query: str, *args: Any) -> str:
        """Execute query without returning rows (INSERT, UPDATE, DELETE)"""
        async with self._connection() as conn:
            return await conn.execute(query, *args)

    @staticmethod
    def _parse_row_count(result: str) -> int:
        """Extract row count from PostgreSQL result like 'UPDATE 5' or 'DELETE 3'."""
        if not result:
            return 0
        return int(result.split()[-1])
