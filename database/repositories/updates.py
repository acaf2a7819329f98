"""
Update Repository - Release-note storage on SQLite

Same surface as the asyncpg UpdateRepository so the reconciler and the
query API run unchanged against either backend. Methods are async but
execute directly on the shared sqlite3 connection; a local run is a
single writer.

REPOSITORY PATTERN: Each write commits immediately.
"""

import sqlite3
from datetime import date, datetime
from typing import Dict, List, Optional

from config import get_logger
from database.models import Update
from database.repositories.base import BaseRepository
from exceptions import DataIntegrityError, DuplicateUpdateError

logger = get_logger(__name__).bind(component="database")

UPDATE_COLUMNS = "unique_id, tool, version, date, description, link, created_at, updated_at"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally (ESCAPE '\\')"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def build_update(row: sqlite3.Row) -> Update:
    """Build Update from a SQLite row (dates stored as ISO text)"""
    return Update(
        unique_id=row["unique_id"],
        tool=row["tool"],
        version=row["version"],
        date=date.fromisoformat(row["date"]),
        description=row["description"] or "",
        link=row["link"] or "",
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


class UpdateRepository(BaseRepository):
    """Repository for release-note updates"""

    async def get_update(self, unique_id: str) -> Optional[Update]:
        """Get a single update by identity hash"""
        row = self._fetch_one(
            f"SELECT {UPDATE_COLUMNS} FROM updates WHERE unique_id = ?",
            (unique_id,),
        )
        return build_update(row) if row else None

    async def insert_update(self, update: Update) -> None:
        """Insert a new update. created_at is set here and never changed after.

        Raises:
            DuplicateUpdateError: If unique_id already exists
        """
        try:
            self._execute(
                """
                INSERT INTO updates (
                    unique_id, tool, version, date, description, link,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
                """,
                (
                    update.unique_id,
                    update.tool,
                    update.version,
                    update.date.isoformat(),
                    update.description,
                    update.link,
                ),
            )
        except DataIntegrityError as e:
            raise DuplicateUpdateError(update.unique_id) from e
        self._commit()

        logger.debug("update inserted", unique_id=update.unique_id, tool=update.tool)

    async def update_content(
        self, unique_id: str, description: str, link: str, version: str
    ) -> bool:
        """Overwrite mutable content if any field differs

        Identity, date and created_at are untouched.

        Returns:
            True if a row changed, False if content was already identical
        """
        cursor = self._execute(
            """
            UPDATE updates
            SET description = ?, link = ?, version = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE unique_id = ?
              AND (description IS NOT ? OR link IS NOT ? OR version IS NOT ?)
            """,
            (description, link, version, unique_id, description, link, version),
        )
        self._commit()

        changed = cursor.rowcount > 0
        if changed:
            logger.debug("update content changed", unique_id=unique_id)
        return changed

    async def search_updates(self, tool: Optional[str] = None, limit: int = 20) -> List[Update]:
        """Updates ordered by date descending, optionally filtered by tool substring

        Args:
            tool: Case-insensitive substring of the tool name
            limit: Maximum results
        """
        if tool:
            rows = self._fetch_all(
                f"""
                SELECT {UPDATE_COLUMNS} FROM updates
                WHERE tool LIKE ? ESCAPE '\\'
                ORDER BY date DESC, id DESC
                LIMIT ?
                """,
                (f"%{escape_like(tool)}%", limit),
            )
        else:
            rows = self._fetch_all(
                f"""
                SELECT {UPDATE_COLUMNS} FROM updates
                ORDER BY date DESC, id DESC
                LIMIT ?
                """,
                (limit,),
            )

        return [build_update(row) for row in rows]

    async def count_by_tool(self) -> Dict[str, int]:
        """Record counts per tool"""
        rows = self._fetch_all(
            "SELECT tool, COUNT(*) AS total FROM updates GROUP BY tool ORDER BY tool"
        )
        return {row["tool"]: row["total"] for row in rows}
