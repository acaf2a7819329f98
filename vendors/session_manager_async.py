"""
Async Session Manager for Vendor Extractors

Centralized HTTP session pooling using aiohttp for all extractors.

Benefits:
- Connection reuse across all pages of a vendor
- One session per vendor for the lifetime of a run
- Explicit ownership: the run creates the manager and closes it

Usage:
    async with AsyncSessionManager() as sessions:
        adapter = get_async_adapter("sdelements", sessions=sessions)
        updates = await adapter.fetch_updates()
"""

from typing import Dict, Optional

import aiohttp

from config import config, get_logger

logger = get_logger(__name__).bind(component="vendor")


class AsyncSessionManager:
    """
    Manages aiohttp client sessions for vendor extractors.

    Creates one session per vendor with connection pooling. Sessions are
    created lazily and live until close_all().
    """

    def __init__(self, timeout_total: Optional[int] = None, user_agent: Optional[str] = None):
        self.timeout_total = timeout_total or config.HTTP_TIMEOUT
        self.user_agent = user_agent or config.USER_AGENT
        self._sessions: Dict[str, aiohttp.ClientSession] = {}
        self._closed = False

    async def __aenter__(self) -> "AsyncSessionManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_all()

    async def get_session(self, vendor: str) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session for vendor.

        Args:
            vendor: Vendor key (e.g., "veracode", "sdelements")

        Returns:
            Shared aiohttp.ClientSession for vendor
        """
        if self._closed:
            raise RuntimeError("AsyncSessionManager has been closed")

        if vendor not in self._sessions or self._sessions[vendor].closed:
            timeout = aiohttp.ClientTimeout(
                total=self.timeout_total,
                connect=15,
                sock_read=self.timeout_total
            )

            connector = aiohttp.TCPConnector(
                limit=10,
                limit_per_host=5,
                ttl_dns_cache=300,
            )

            headers = {
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            }

            self._sessions[vendor] = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=headers,
                raise_for_status=False  # Status handled in AsyncBaseAdapter._get_text
            )

            logger.debug(
                "created async session",
                vendor=vendor,
                timeout_seconds=self.timeout_total
            )

        return self._sessions[vendor]

    async def close_all(self):
        """Close all active sessions (cleanup at end of run)"""
        if self._closed:
            return

        logger.debug("closing async sessions", session_count=len(self._sessions))

        for vendor, session in self._sessions.items():
            if not session.closed:
                await session.close()
                logger.debug("closed async session", vendor=vendor)

        self._sessions.clear()
        self._closed = True
