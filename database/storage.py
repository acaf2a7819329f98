"""Storage backend selection

PostgreSQL in production (RELEASEWATCH_USE_POSTGRES=true), SQLite otherwise.
Both expose `.updates`, `init_schema()` and `close()`; callers own the
returned object and close it.
"""

from typing import Optional, Union

from config import config, get_logger
from database.db import UnifiedDatabase
from database.db_postgres import Database

logger = get_logger(__name__).bind(component="database")

Storage = Union[Database, UnifiedDatabase]


async def open_database(
    use_postgres: Optional[bool] = None,
    sqlite_path: Optional[str] = None,
) -> Storage:
    """Open the configured backend

    Raises:
        DatabaseConnectionError: If the backend is unreachable
    """
    if use_postgres is None:
        use_postgres = config.USE_POSTGRES

    if use_postgres:
        logger.info("opening postgres storage", host=config.POSTGRES_HOST, db=config.POSTGRES_DB)
        return await Database.create()

    path = sqlite_path or config.SQLITE_PATH
    logger.info("opening sqlite storage", db_path=path)
    return UnifiedDatabase(path)
