"""Pipeline Fetcher - Run extractors and reconcile their drafts"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from config import get_logger
from database.storage import Storage
from pipeline.protocols import MetricsCollector, NullMetrics
from pipeline.reconciler import Outcome, Reconciler
from pipeline.reporter import RunReport
from vendors.adapters.base_adapter_async import AsyncBaseAdapter
from vendors.factory import get_active_adapters
from vendors.session_manager_async import AsyncSessionManager

logger = get_logger(__name__).bind(component="fetcher")


class RunStatus(Enum):
    COMPLETED = "completed"
    EMPTY = "empty"


@dataclass
class ToolRunResult:
    vendor: str
    tool: str
    status: RunStatus
    drafts_found: int = 0
    new: int = 0
    updated: int = 0
    unchanged: int = 0
    duration_seconds: float = 0.0


class Fetcher:
    """Runs extractors one after another and reconciles each draft

    Extractor failures never escape fetch_updates(); they surface here as
    an EMPTY run. Storage errors propagate and abort the run.
    """

    def __init__(
        self,
        db: Storage,
        metrics: Optional[MetricsCollector] = None,
        sessions: Optional[AsyncSessionManager] = None,
    ):
        self.db = db
        self.metrics = metrics or NullMetrics()
        self.sessions = sessions
        self.reconciler = Reconciler(db, metrics=self.metrics)
        self.report = RunReport()

    async def run_adapter(self, adapter: AsyncBaseAdapter) -> ToolRunResult:
        """Fetch one extractor's drafts and reconcile them in order

        Raises:
            DatabaseError: On storage failure (fatal for the run)
        """
        start_time = time.time()
        result = ToolRunResult(vendor=adapter.vendor, tool=adapter.tool_name, status=RunStatus.EMPTY)
        self.report.start_tool(adapter.tool_name)

        logger.info("starting extractor", vendor=adapter.vendor, tool=adapter.tool_name)
        drafts = await adapter.fetch_updates()
        result.drafts_found = len(drafts)

        for draft in drafts:
            reconciled = await self.reconciler.reconcile(adapter.tool_name, draft)
            self.report.record(reconciled)

            if reconciled.outcome is Outcome.NEW:
                result.new += 1
            elif reconciled.outcome is Outcome.UPDATED:
                result.updated += 1
            else:
                result.unchanged += 1

        if drafts:
            result.status = RunStatus.COMPLETED
        else:
            logger.warning("extractor returned no updates", vendor=adapter.vendor, tool=adapter.tool_name)

        result.duration_seconds = round(time.time() - start_time, 2)
        logger.info(
            "extractor completed",
            vendor=adapter.vendor,
            tool=adapter.tool_name,
            drafts=result.drafts_found,
            new=result.new,
            updated=result.updated,
            unchanged=result.unchanged,
            duration_seconds=result.duration_seconds,
        )
        return result

    async def run_all(self, keys: Optional[List[str]] = None) -> List[ToolRunResult]:
        """Run every active extractor (or the given keys) sequentially

        Raises:
            ConfigurationError: If a key is not registered
            DatabaseError: On storage failure
        """
        start_time = time.time()
        adapters = get_active_adapters(keys, metrics=self.metrics, sessions=self.sessions)
        logger.info("starting run", extractors=[adapter.vendor for adapter in adapters])

        results = []
        try:
            for adapter in adapters:
                results.append(await self.run_adapter(adapter))
        finally:
            for adapter in adapters:
                await adapter.close()
            self.metrics.run_duration.observe(time.time() - start_time)

        totals = self.report.totals()
        logger.info(
            "run completed",
            duration_seconds=round(time.time() - start_time, 1),
            new=totals[Outcome.NEW],
            updated=totals[Outcome.UPDATED],
            unchanged=totals[Outcome.UNCHANGED],
        )
        return results
