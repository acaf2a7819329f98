"""Async Base Adapter - Shared HTTP, page fan-out and validation for vendor extractors."""

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from config import config, get_logger
from exceptions import VendorError, VendorHTTPError
from pipeline.protocols import MetricsCollector, NullMetrics
from vendors.schemas import DraftUpdate
from vendors.session_manager_async import AsyncSessionManager

logger = get_logger(__name__).bind(component="vendor")

PageParser = Callable[[str, str], List[Dict[str, Any]]]


class AsyncBaseAdapter:
    """Async base extractor. Subclasses set tool_name/vendor and implement _fetch_updates_impl().

    Contract: config errors raise in __init__, runtime errors never escape
    fetch_updates() - a failed page contributes nothing, a failed run returns [].
    """

    tool_name: str = ""
    vendor: str = ""

    def __init__(
        self,
        metrics: Optional[MetricsCollector] = None,
        sessions: Optional[AsyncSessionManager] = None,
        page_concurrency: Optional[int] = None,
    ):
        if not self.tool_name or not self.vendor:
            raise ValueError(f"{self.__class__.__name__} must define tool_name and vendor")

        self.metrics = metrics or NullMetrics()
        self.sessions = sessions
        self._owns_sessions = sessions is None
        self.page_concurrency = page_concurrency or config.PAGE_CONCURRENCY

        logger.debug("initialized async adapter", vendor=self.vendor, tool=self.tool_name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the session manager if this adapter created it"""
        if self._owns_sessions and self.sessions is not None:
            await self.sessions.close_all()
            self.sessions = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.sessions is None:
            self.sessions = AsyncSessionManager()
        return await self.sessions.get_session(self.vendor)

    async def _get_text(self, url: str, **kwargs) -> str:
        """GET a document and return its body. Raises VendorHTTPError on failure."""
        session = await self._get_session()
        start_time = time.time()

        try:
            logger.debug("vendor request", vendor=self.vendor, url=url[:100])
            async with session.get(url, **kwargs) as response:
                duration = time.time() - start_time

                if response.status >= 400:
                    self.metrics.vendor_requests.labels(vendor=self.vendor, status=f"http_{response.status}").inc()
                    err = VendorHTTPError(
                        f"HTTP {response.status} error",
                        vendor=self.vendor,
                        status_code=response.status,
                        url=url,
                    )
                    self.metrics.record_error(component="vendor", error=err)
                    logger.error(
                        "vendor http error",
                        vendor=self.vendor,
                        status_code=response.status,
                        url=url[:100],
                        duration_seconds=round(duration, 2)
                    )
                    raise err

                text = await response.text()

        except asyncio.TimeoutError as e:
            duration = time.time() - start_time
            self.metrics.vendor_requests.labels(vendor=self.vendor, status="timeout").inc()
            self.metrics.record_error(component="vendor", error=e)
            logger.error("vendor request timeout", vendor=self.vendor, url=url[:100], duration_seconds=round(duration, 2))
            raise VendorHTTPError(f"Request timeout after {duration:.1f}s", vendor=self.vendor, url=url) from e

        except aiohttp.ClientError as e:
            duration = time.time() - start_time
            self.metrics.vendor_requests.labels(vendor=self.vendor, status="error").inc()
            self.metrics.record_error(component="vendor", error=e)
            logger.error("vendor request failed", vendor=self.vendor, url=url[:100], error=str(e), error_type=type(e).__name__, duration_seconds=round(duration, 2))
            raise VendorHTTPError(f"Request failed: {e}", vendor=self.vendor, url=url) from e

        duration = time.time() - start_time
        self.metrics.vendor_requests.labels(vendor=self.vendor, status="success").inc()
        self.metrics.vendor_request_duration.labels(vendor=self.vendor).observe(duration)
        logger.debug("vendor response", vendor=self.vendor, url=url[:100], content_length=len(text), duration_seconds=round(duration, 2))
        return text

    async def _fetch_page(self, url: str, parse: PageParser) -> List[Dict[str, Any]]:
        """Fetch and parse one page. Returns [] on any failure (never raises)."""
        try:
            logger.info("fetching page", vendor=self.vendor, url=url)
            html = await self._get_text(url)
            updates = await asyncio.to_thread(parse, html, url)
            logger.info("found updates on page", vendor=self.vendor, url=url, count=len(updates))
            return updates
        except VendorError as e:
            logger.warning("page skipped", vendor=self.vendor, url=url, error=str(e), retryable=e.is_retryable)
            return []
        except Exception as e:
            self.metrics.record_error(component="vendor", error=e)
            logger.error("page failed", vendor=self.vendor, url=url, error=str(e), error_type=type(e).__name__)
            return []

    async def _fetch_pages(self, urls: List[str], parse: PageParser) -> List[Dict[str, Any]]:
        """Fetch pages with per-page failure isolation, preserving URL order"""
        if self.page_concurrency <= 1:
            results = [await self._fetch_page(url, parse) for url in urls]
        else:
            semaphore = asyncio.Semaphore(self.page_concurrency)

            async def bounded(url: str) -> List[Dict[str, Any]]:
                async with semaphore:
                    return await self._fetch_page(url, parse)

            results = await asyncio.gather(*(bounded(url) for url in urls))

        return [update for page_updates in results for update in page_updates]

    def _validate_updates(self, raw_updates: List[Dict[str, Any]]) -> List[DraftUpdate]:
        """Validate raw dicts into DraftUpdate, dropping invalid ones"""
        drafts: List[DraftUpdate] = []
        for raw in raw_updates:
            try:
                drafts.append(DraftUpdate(**raw))
            except PydanticValidationError as e:
                logger.warning(
                    "update failed validation",
                    vendor=self.vendor,
                    version=str(raw.get("version", "unknown"))[:50],
                    error=str(e).splitlines()[0],
                )

        if len(drafts) < len(raw_updates):
            logger.warning("filtered invalid updates", vendor=self.vendor, total=len(raw_updates), valid=len(drafts))
        return drafts

    async def fetch_updates(self) -> List[DraftUpdate]:
        """Fetch current updates, validate, return list. Returns [] on failure (never raises)."""
        try:
            raw_updates = await self._fetch_updates_impl()
        except NotImplementedError:
            raise
        except Exception as e:
            self.metrics.record_error(component="vendor", error=e)
            logger.error("fetch_updates failed", vendor=self.vendor, tool=self.tool_name, error=str(e), error_type=type(e).__name__)
            return []

        drafts = self._validate_updates(raw_updates)
        self.metrics.updates_fetched.labels(tool=self.tool_name).inc(len(drafts))
        logger.info("fetched updates", vendor=self.vendor, tool=self.tool_name, count=len(drafts))
        return drafts

    async def _fetch_updates_impl(self) -> List[Dict[str, Any]]:
        """Subclass must implement. Return raw update dicts."""
        raise NotImplementedError(f"{self.__class__.__name__} must implement _fetch_updates_impl()")
