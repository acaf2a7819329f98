"""
Async Veracode RSS Adapter - Feed-discovered release-note pages

Hybrid extractor: the RSS index at docs.veracode.com/updates/rss.xml lists
every category page, so categories Veracode adds later are picked up
without a code change. Each discovered page is parsed like the static
adapter, with abbreviated month names ("Jan", "Sept") also accepted.

Discovery failure (index unreachable or malformed) yields no updates for
the run; individual page failures are skipped.
"""

import xml.etree.ElementTree as ET
from functools import partial
from typing import Dict, Any, List, Optional

from config import get_logger
from exceptions import VendorError, VendorParsingError
from pipeline.protocols import MetricsCollector
from vendors.adapters.base_adapter_async import AsyncBaseAdapter
from vendors.adapters.parsers.release_notes_parser import parse_release_notes_page
from vendors.adapters.parsers.rss_parser import extract_feed_links
from vendors.session_manager_async import AsyncSessionManager

logger = get_logger(__name__).bind(component="vendor")

VERACODE_RSS_URL = "https://docs.veracode.com/updates/rss.xml"

# Informational pages listed in the feed that carry no release notes
IGNORED_URLS = (
    "c_release_notes",  # "About product updates"
)


class AsyncVeracodeRssAdapter(AsyncBaseAdapter):
    """Async extractor that discovers Veracode category pages via RSS"""

    tool_name = "Veracode"
    vendor = "veracode_rss"

    def __init__(
        self,
        rss_url: str = VERACODE_RSS_URL,
        ignored_urls: Optional[List[str]] = None,
        metrics: Optional[MetricsCollector] = None,
        sessions: Optional[AsyncSessionManager] = None,
        page_concurrency: Optional[int] = None,
    ):
        super().__init__(metrics=metrics, sessions=sessions, page_concurrency=page_concurrency)
        self.rss_url = rss_url
        self.ignored_urls = tuple(ignored_urls) if ignored_urls is not None else IGNORED_URLS

    async def discover_pages(self) -> List[str]:
        """Return category page URLs from the RSS index. Raises VendorError on failure."""
        xml_text = await self._get_text(
            self.rss_url,
            headers={"Accept": "application/rss+xml, application/xml, text/xml"},
        )

        try:
            urls = extract_feed_links(xml_text, ignored=self.ignored_urls)
        except ET.ParseError as e:
            raise VendorParsingError(
                "RSS index is not well-formed XML",
                vendor=self.vendor,
                url=self.rss_url,
                original_error=e,
            ) from e

        logger.info("discovered category pages", vendor=self.vendor, count=len(urls))
        return urls

    async def _fetch_updates_impl(self) -> List[Dict[str, Any]]:
        try:
            urls = await self.discover_pages()
        except VendorError as e:
            logger.error("discovery failed", vendor=self.vendor, rss_url=self.rss_url, error=str(e))
            return []

        parse = partial(parse_release_notes_page, allow_abbreviated=True)
        return await self._fetch_pages(urls, parse)
