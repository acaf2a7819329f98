"""
Async Veracode Adapter - Static list of release-note category pages

Each page on docs.veracode.com/updates is one product category (CLI,
Dynamic Analysis, SCA, ...) with dated h2 sections and one h3 per note.
The category list is fixed here; AsyncVeracodeRssAdapter discovers it
from the RSS index instead.
"""

from typing import Dict, Any, List, Optional

from pipeline.protocols import MetricsCollector
from vendors.adapters.base_adapter_async import AsyncBaseAdapter
from vendors.adapters.parsers.release_notes_parser import parse_release_notes_page
from vendors.session_manager_async import AsyncSessionManager

VERACODE_UPDATES_BASE = "https://docs.veracode.com/updates/r"

CATEGORY_PAGES = [
    "Veracode_CLI_Updates",
    "c_all_was",
    "EASM_updates",
    "Fix_updates",
    "c_all_int",
    "Package_firewall_updates",
    "c_all_platform",
    "c_all_sca",
    "c_all_static",
    "c_all_training",
    "VRM_updates",
]


class AsyncVeracodeAdapter(AsyncBaseAdapter):
    """Async extractor for the fixed set of Veracode update category pages"""

    tool_name = "Veracode"
    vendor = "veracode"

    def __init__(
        self,
        urls: Optional[List[str]] = None,
        metrics: Optional[MetricsCollector] = None,
        sessions: Optional[AsyncSessionManager] = None,
        page_concurrency: Optional[int] = None,
    ):
        super().__init__(metrics=metrics, sessions=sessions, page_concurrency=page_concurrency)
        self.urls = urls or [f"{VERACODE_UPDATES_BASE}/{page}" for page in CATEGORY_PAGES]

    async def _fetch_updates_impl(self) -> List[Dict[str, Any]]:
        return await self._fetch_pages(self.urls, parse_release_notes_page)
