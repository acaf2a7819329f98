"""
Database Repositories (SQLite)

Focused repository classes for clean separation of concerns:
- UpdateRepository: Release-note storage, lookup and search
"""

from database.repositories.base import BaseRepository
from database.repositories.updates import UpdateRepository

__all__ = [
    "BaseRepository",
    "UpdateRepository",
]
