"""Pipeline Reconciler - Classify drafts against stored updates and persist changes

One read and at most one write per draft:

    not stored        -> insert            -> NEW
    stored, same      -> no write          -> UNCHANGED
    stored, differs   -> content overwrite -> UPDATED

Identity (tool, date, version hash), date and created_at never change
after the first insert.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import get_logger
from database.id_generation import generate_update_id
from database.models import Update
from database.storage import Storage
from exceptions import DatabaseError, DuplicateUpdateError
from pipeline.protocols import MetricsCollector, NullMetrics
from vendors.schemas import DraftUpdate

logger = get_logger(__name__).bind(component="reconciler")


class Outcome(Enum):
    NEW = "new"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass
class ReconcileResult:
    outcome: Outcome
    unique_id: str
    tool: str
    version: str


class Reconciler:
    """Idempotent upsert of extractor drafts into storage

    Storage errors propagate; the caller treats them as fatal for the run.
    """

    def __init__(self, db: Storage, metrics: Optional[MetricsCollector] = None):
        self.db = db
        self.metrics = metrics or NullMetrics()

    async def reconcile(self, tool: str, draft: DraftUpdate) -> ReconcileResult:
        """Classify one draft and write it if new or changed

        Args:
            tool: Tool name the draft was extracted for
            draft: Validated draft from an extractor

        Returns:
            ReconcileResult with the outcome and identity

        Raises:
            DatabaseError: On storage failure
        """
        unique_id = generate_update_id(tool, draft.date, draft.version)

        existing = await self.db.updates.get_update(unique_id)

        if existing is None:
            try:
                await self.db.updates.insert_update(
                    Update(
                        unique_id=unique_id,
                        tool=tool,
                        version=draft.version,
                        date=draft.date,
                        description=draft.description,
                        link=draft.link,
                    )
                )
                logger.info("new update", tool=tool, unique_id=unique_id, version=draft.version[:80])
                return self._result(Outcome.NEW, unique_id, tool, draft.version)

            except DuplicateUpdateError:
                # Another writer inserted the same identity first
                logger.debug("insert lost race, re-reading", tool=tool, unique_id=unique_id)
                existing = await self.db.updates.get_update(unique_id)
                if existing is None:
                    raise DatabaseError(
                        f"Update {unique_id} reported as duplicate but not found",
                        context={"tool": tool, "unique_id": unique_id},
                    )

        if not existing.content_differs(draft.description, draft.link, draft.version):
            logger.debug("update unchanged", tool=tool, unique_id=unique_id)
            return self._result(Outcome.UNCHANGED, unique_id, tool, draft.version)

        changed = await self.db.updates.update_content(
            unique_id, draft.description, draft.link, draft.version
        )
        if not changed:
            # Same content landed from a concurrent writer between read and write
            return self._result(Outcome.UNCHANGED, unique_id, tool, draft.version)

        logger.info("update changed", tool=tool, unique_id=unique_id, version=draft.version[:80])
        return self._result(Outcome.UPDATED, unique_id, tool, draft.version)

    def _result(self, outcome: Outcome, unique_id: str, tool: str, version: str) -> ReconcileResult:
        self.metrics.updates_reconciled.labels(tool=tool, outcome=outcome.value).inc()
        return ReconcileResult(outcome=outcome, unique_id=unique_id, tool=tool, version=version)
