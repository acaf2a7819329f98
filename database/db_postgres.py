"""PostgreSQL Database Layer with Repository Pattern

Production storage for releasewatch. Database class handles pool lifecycle
and schema; UpdateRepository handles all data access.
"""

import asyncpg
from typing import Optional
from pathlib import Path

from config import get_logger, config
from database.repositories_async import UpdateRepository
from exceptions import DatabaseConnectionError, DatabaseError

logger = get_logger(__name__).bind(component="database_postgres")


class Database:
    """Async PostgreSQL database with repository pattern

    Architecture:
    - Connection pooling (asyncpg pool shared across repositories)
    - Repository pattern (UpdateRepository)

    Usage:
        db = await Database.create()
        update = await db.updates.get_update(unique_id)
        await db.close()
    """

    pool: asyncpg.Pool
    updates: UpdateRepository

    def __init__(self, pool: asyncpg.Pool):
        """Initialize with connection pool and repositories

        Use Database.create() classmethod instead of direct instantiation.
        """
        self.pool = pool
        self.updates = UpdateRepository(pool)

        logger.info("database initialized with repositories")

    async def __aenter__(self) -> "Database":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @classmethod
    async def create(
        cls,
        dsn: Optional[str] = None,
        min_size: int = config.POSTGRES_POOL_MIN_SIZE,
        max_size: int = config.POSTGRES_POOL_MAX_SIZE
    ) -> "Database":
        """Create database with connection pool

        Args:
            dsn: PostgreSQL connection string (defaults to config.get_postgres_dsn())
            min_size: Minimum pool size (default: config.POSTGRES_POOL_MIN_SIZE)
            max_size: Maximum pool size (default: config.POSTGRES_POOL_MAX_SIZE)

        Returns:
            Initialized Database instance

        Raises:
            DatabaseConnectionError: If the pool cannot be created
        """
        if dsn is None:
            dsn = config.get_postgres_dsn()

        try:
            pool = await asyncpg.create_pool(
                dsn,
                min_size=min_size,
                max_size=max_size,
                command_timeout=60,
            )
            logger.info("connection pool created", min_size=min_size, max_size=max_size)
            return cls(pool)
        except (asyncpg.PostgresError, OSError, ConnectionError) as e:
            # Connection-specific errors only - let programming errors fail loudly
            logger.error("failed to create connection pool", error=str(e))
            raise DatabaseConnectionError(f"Failed to connect to PostgreSQL: {e}") from e

    async def close(self):
        """Close connection pool"""
        await self.pool.close()
        logger.info("connection pool closed")

    async def init_schema(self):
        """Initialize database schema from schema_postgres.sql

        Safe to call multiple times (uses IF NOT EXISTS).
        """
        schema_path = Path(__file__).parent / "schema_postgres.sql"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        schema_sql = schema_path.read_text()

        try:
            async with self.pool.acquire() as conn:
                await conn.execute(schema_sql)
        except (asyncpg.InterfaceError, OSError, ConnectionError) as e:
            logger.error("schema initialization lost connection", error=str(e))
            raise DatabaseConnectionError(f"Failed to initialize schema: {e}") from e
        except asyncpg.PostgresError as e:
            logger.error("schema initialization failed", error=str(e))
            raise DatabaseError(f"Failed to initialize schema: {e}") from e

        logger.info("schema initialized")
