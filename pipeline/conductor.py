"""
Pipeline Conductor - Lightweight orchestration

Coordinates:
- Monitoring runs (via Fetcher + Reconciler)
- Extractor previews without storage
- Admin commands (init-db, stats)

Pure async architecture; each CLI command opens and closes its own
storage and HTTP sessions.
"""

import asyncio
import sys
from typing import Dict, List, Optional

from database.storage import Storage, open_database
from exceptions import ConfigurationError, DatabaseError
from pipeline.click_types import EXTRACTOR
from pipeline.fetcher import Fetcher, ToolRunResult
from pipeline.protocols import MetricsCollector
from pipeline.reporter import RULE, split_version, truncate_title
from vendors.factory import VENDOR_ADAPTERS, get_async_adapter
from vendors.schemas import DraftUpdate
from vendors.session_manager_async import AsyncSessionManager

from config import config, get_logger

logger = get_logger(__name__).bind(component="releasewatch")

PREVIEW_RECENT = 5


class Conductor:
    """Lightweight orchestrator for monitoring runs"""

    def __init__(
        self,
        db: Optional[Storage] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """Initialize the conductor

        Args:
            db: Storage backend (None for storage-free previews)
            metrics: Optional metrics collector (Prometheus when the run exports a textfile)
        """
        self.db = db
        self.metrics = metrics
        self.sessions = AsyncSessionManager()
        self.fetcher: Optional[Fetcher] = None

    async def close(self):
        """Release HTTP sessions. Storage is owned by the caller."""
        await self.sessions.close_all()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _fetcher(self) -> Fetcher:
        if self.db is None:
            raise DatabaseError("Storage is required for a monitoring run")
        return Fetcher(db=self.db, metrics=self.metrics, sessions=self.sessions)

    async def run(self, keys: Optional[List[str]] = None) -> List[ToolRunResult]:
        """Run extractors once and reconcile. The report stays on self.fetcher."""
        self.fetcher = self._fetcher()
        return await self.fetcher.run_all(keys)

    async def preview(self, key: str) -> List[DraftUpdate]:
        """Run a single extractor without touching storage"""
        async with get_async_adapter(key, metrics=self.metrics, sessions=self.sessions) as adapter:
            return await adapter.fetch_updates()

    async def stats(self) -> Dict[str, int]:
        if self.db is None:
            raise DatabaseError("Storage is required for stats")
        return await self.db.updates.count_by_tool()


def render_preview(key: str, drafts: List[DraftUpdate]) -> str:
    """Drafts grouped by category, then the most recent few"""
    lines = [RULE, f"  {key}: {len(drafts)} update(s) extracted", RULE, ""]

    by_category: Dict[str, List[DraftUpdate]] = {}
    for draft in drafts:
        category, _ = split_version(draft.version)
        by_category.setdefault(category, []).append(draft)

    for category, category_drafts in sorted(by_category.items()):
        lines.append(f"[{category}] {len(category_drafts)}")

    if drafts:
        lines.append("")
        lines.append(f"Most recent {min(PREVIEW_RECENT, len(drafts))}:")
        recent = sorted(drafts, key=lambda draft: draft.date, reverse=True)[:PREVIEW_RECENT]
        for draft in recent:
            lines.append(f"  {draft.date.isoformat()}  {truncate_title(draft.version)}")
            lines.append(f"      {draft.link}")

    return "\n".join(lines)


def main():
    """Entry point for the releasewatch CLI"""
    import click

    @click.group(invoke_without_command=True)
    @click.pass_context
    def cli(ctx):
        """Release-notes monitor for vendor security tools"""
        if ctx.invoked_subcommand is None:
            click.echo(ctx.get_help())

    @cli.command("run")
    @click.option("--only", "only", multiple=True, type=EXTRACTOR, help="Run only these extractors")
    def run_command(only):
        """Run active extractors once and print the report"""
        run_metrics = None
        if config.METRICS_TEXTFILE:
            from server.metrics import metrics as run_metrics

        conductor = Conductor(metrics=run_metrics)

        def export_metrics():
            if run_metrics is not None:
                from server.metrics import write_metrics_textfile
                write_metrics_textfile(config.METRICS_TEXTFILE)
                logger.info("metrics written", path=config.METRICS_TEXTFILE)

        async def run():
            conductor.db = await open_database()
            try:
                async with conductor:
                    await conductor.run(list(only) or None)
            finally:
                await conductor.db.close()

        try:
            asyncio.run(run())
        except (DatabaseError, ConfigurationError) as e:
            logger.error("run failed", error=str(e), error_type=type(e).__name__, retryable=e.is_retryable)
            if run_metrics is not None:
                run_metrics.record_error(component="pipeline", error=e)
            export_metrics()
            if conductor.fetcher is not None and conductor.fetcher.report.tools:
                click.echo(conductor.fetcher.report.render())
            click.echo(f"\nRun failed: {e}", err=True)
            sys.exit(1)

        export_metrics()
        click.echo(conductor.fetcher.report.render())

    @cli.command("preview")
    @click.argument("key", type=EXTRACTOR)
    def preview_command(key):
        """Run one extractor without storage and print what it finds"""
        async def run():
            async with Conductor() as conductor:
                return await conductor.preview(key)

        drafts = asyncio.run(run())
        click.echo(render_preview(key, drafts))

    @cli.command("init-db")
    def init_db_command():
        """Create the storage schema"""
        async def run():
            db = await open_database()
            try:
                await db.init_schema()
            finally:
                await db.close()

        try:
            asyncio.run(run())
        except DatabaseError as e:
            click.echo(f"Schema initialization failed: {e}", err=True)
            sys.exit(1)
        click.echo("Schema initialized")

    @cli.command("stats")
    def stats_command():
        """Print stored record counts per tool"""
        async def run():
            db = await open_database()
            try:
                async with Conductor(db) as conductor:
                    return await conductor.stats()
            finally:
                await db.close()

        try:
            counts = asyncio.run(run())
        except DatabaseError as e:
            click.echo(f"Stats failed: {e}", err=True)
            sys.exit(1)

        if not counts:
            click.echo("No updates stored")
            return

        click.echo(f"{'Tool':<30} {'Updates':>8}")
        click.echo("-" * 39)
        for tool, total in counts.items():
            click.echo(f"{tool:<30} {total:>8}")
        click.echo("-" * 39)
        click.echo(f"{'Total':<30} {sum(counts.values()):>8}")

    @cli.command("extractors")
    def extractors_command():
        """List registered extractors and which are active"""
        for key, adapter_cls in VENDOR_ADAPTERS.items():
            marker = "*" if key in config.EXTRACTORS else " "
            click.echo(f"{marker} {key:<15} {adapter_cls.tool_name}")
        click.echo("\n* active (RELEASEWATCH_EXTRACTORS)")

    cli()


if __name__ == "__main__":
    main()
