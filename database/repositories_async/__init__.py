"""Async PostgreSQL repositories using asyncpg connection pooling"""

from database.repositories_async.base import BaseRepository
from database.repositories_async.updates import UpdateRepository

__all__ = [
    "BaseRepository",
    "UpdateRepository",
]
