"""
Async SD Elements Adapter - Year-indexed release note archives

docs.sdelements.com keeps one page per year; releases are h2 headings
anchored by a 4-5 digit id ("20254" for 2025.4). Dates come from the
paragraph under the heading, or are estimated from the quarter in the
version number when the page has none.
"""

from typing import Dict, Any, List, Optional

from pipeline.protocols import MetricsCollector
from vendors.adapters.base_adapter_async import AsyncBaseAdapter
from vendors.adapters.parsers.version_anchor_parser import parse_version_anchor_page
from vendors.session_manager_async import AsyncSessionManager

SDELEMENTS_RELEASE_NOTES = "https://docs.sdelements.com/master/guide/docs/release_notes/"

YEAR_PAGES = [
    SDELEMENTS_RELEASE_NOTES,  # Current year
    f"{SDELEMENTS_RELEASE_NOTES}2024.html",
    f"{SDELEMENTS_RELEASE_NOTES}2023.html",
]


class AsyncSDElementsAdapter(AsyncBaseAdapter):
    """Async extractor for SD Elements release notes"""

    tool_name = "SD Elements"
    vendor = "sdelements"

    def __init__(
        self,
        urls: Optional[List[str]] = None,
        metrics: Optional[MetricsCollector] = None,
        sessions: Optional[AsyncSessionManager] = None,
        page_concurrency: Optional[int] = None,
    ):
        super().__init__(metrics=metrics, sessions=sessions, page_concurrency=page_concurrency)
        self.urls = urls or list(YEAR_PAGES)

    async def _fetch_updates_impl(self) -> List[Dict[str, Any]]:
        return await self._fetch_pages(self.urls, parse_version_anchor_page)
