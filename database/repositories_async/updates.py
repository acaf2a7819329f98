"""Async UpdateRepository for release-note storage on PostgreSQL."""

from typing import Dict, List, Optional

import asyncpg

from config import get_logger
from database.models import Update
from database.repositories.updates import escape_like
from database.repositories_async.base import BaseRepository
from exceptions import DataIntegrityError, DuplicateUpdateError

logger = get_logger(__name__).bind(component="update_repository")

UPDATE_COLUMNS = "unique_id, tool, version, date, description, link, created_at, updated_at"


def build_update(row: asyncpg.Record) -> Update:
    """Build Update from a PostgreSQL row (DATE and TIMESTAMPTZ decode natively)"""
    return Update(
        unique_id=row["unique_id"],
        tool=row["tool"],
        version=row["version"],
        date=row["date"],
        description=row["description"] or "",
        link=row["link"] or "",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UpdateRepository(BaseRepository):
    """Repository for release-note updates."""

    async def get_update(self, unique_id: str) -> Optional[Update]:
        """Get an update by identity hash."""
        row = await self._fetchrow(
            f"SELECT {UPDATE_COLUMNS} FROM updates WHERE unique_id = $1",
            unique_id,
        )
        return build_update(row) if row else None

    async def insert_update(self, update: Update) -> None:
        """Insert a new update. Raises DuplicateUpdateError if unique_id exists."""
        try:
            await self._execute(
                """
                INSERT INTO updates (unique_id, tool, version, date, description, link)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                update.unique_id,
                update.tool,
                update.version,
                update.date,
                update.description,
                update.link,
            )
        except DataIntegrityError as e:
            raise DuplicateUpdateError(update.unique_id) from e

        logger.debug("update inserted", unique_id=update.unique_id, tool=update.tool)

    async def update_content(
        self, unique_id: str, description: str, link: str, version: str
    ) -> bool:
        """Overwrite mutable content in one conditional statement.

        Returns True if a row changed. Concurrent writers with identical
        content both see False after the first commit.
        """
        result = await self._execute(
            """
            UPDATE updates
            SET description = $2, link = $3, version = $4,
                updated_at = CURRENT_TIMESTAMP
            WHERE unique_id = $1
              AND (description, link, version) IS DISTINCT FROM ($2, $3, $4)
            """,
            unique_id,
            description,
            link,
            version,
        )

        changed = self._parse_row_count(result) > 0
        if changed:
            logger.debug("update content changed", unique_id=unique_id)
        return changed

    async def search_updates(self, tool: Optional[str] = None, limit: int = 20) -> List[Update]:
        """Updates ordered by date descending, optionally filtered by tool substring (ILIKE)."""
        if tool:
            rows = await self._fetch(
                f"""
                SELECT {UPDATE_COLUMNS} FROM updates
                WHERE tool ILIKE $1
                ORDER BY date DESC, id DESC
                LIMIT $2
                """,
                f"%{escape_like(tool)}%",
                limit,
            )
        else:
            rows = await self._fetch(
                f"""
                SELECT {UPDATE_COLUMNS} FROM updates
                ORDER BY date DESC, id DESC
                LIMIT $1
                """,
                limit,
            )

        return [build_update(row) for row in rows]

    async def count_by_tool(self) -> Dict[str, int]:
        """Record counts per tool."""
        rows = await self._fetch(
            "SELECT tool, COUNT(*) AS total FROM updates GROUP BY tool ORDER BY tool"
        )
        return {row["tool"]: row["total"] for row in rows}
