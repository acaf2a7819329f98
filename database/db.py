"""
SQLite Database for releasewatch - Repository Pattern

Local counterpart of the PostgreSQL Database: same `.updates` surface,
same schema shape, used for development runs and tests.
"""

import sqlite3
from pathlib import Path
from importlib.resources import files

from config import get_logger
from database.repositories.updates import UpdateRepository
from exceptions import DatabaseConnectionError, DatabaseError

logger = get_logger(__name__).bind(component="database")


class UnifiedDatabase:
    """
    Single SQLite database interface for releasewatch data.
    Delegates to UpdateRepository.

    Threading Model:
    - Each instance creates its own SQLite connection
    - DO NOT share instances across threads - create one per thread

    Usage:
        db = UnifiedDatabase("data/releasewatch.db")
        update = await db.updates.get_update(unique_id)
        await db.close()
    """

    conn: sqlite3.Connection
    updates: UpdateRepository

    def __init__(self, db_path: str):
        """Open (creating if needed) the database file and its schema"""
        self.db_path = db_path
        self._connect()
        try:
            self._init_schema()
        except DatabaseError:
            self.conn.close()
            raise

        self.updates = UpdateRepository(self.conn)

        logger.info("initialized sqlite database", db_path=db_path)

    async def __aenter__(self) -> "UnifiedDatabase":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _connect(self):
        """Create database connection with optimizations

        Note: check_same_thread=False lets the FastAPI threadpool and the
        event loop share the connection; requests are serialized by SQLite.
        """
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row

            # First statements that touch the file; a non-SQLite file fails here
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
        except (sqlite3.Error, OSError) as e:
            if getattr(self, "conn", None) is not None:
                self.conn.close()
            logger.error("failed to open sqlite database", db_path=self.db_path, error=str(e))
            raise DatabaseConnectionError(f"Failed to open SQLite database: {e}") from e

    def _init_schema(self):
        """Initialize schema from schema.sql

        Uses importlib.resources to load schema.sql, which works correctly
        in both development (source tree) and production (installed package).
        """
        if self.conn is None:
            raise DatabaseConnectionError("Database connection not established")

        schema = files("database").joinpath("schema.sql").read_text()

        try:
            self.conn.executescript(schema)
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error("failed to apply sqlite schema", db_path=self.db_path, error=str(e))
            raise DatabaseError(f"Failed to apply SQLite schema: {e}") from e

    async def init_schema(self):
        """Re-apply the schema (idempotent); matches Database.init_schema()"""
        self._init_schema()
        logger.info("sqlite schema initialized", db_path=self.db_path)

    async def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()
            logger.info("database connection closed", db_path=self.db_path)
