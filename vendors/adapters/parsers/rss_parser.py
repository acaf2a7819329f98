"""
RSS Discovery Parser - Enumerate pages to crawl from an index feed

Only <item> and <link> are required, matched by local name so namespaced
or extended feeds still work. Everything else in the feed is ignored.
"""

import xml.etree.ElementTree as ET
from typing import Iterable, List

from config import get_logger

logger = get_logger(__name__).bind(component="vendor")


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1] if isinstance(tag, str) else ""


def extract_feed_links(xml_text: str, ignored: Iterable[str] = ()) -> List[str]:
    """Return every item link in feed order, skipping ignored URLs

    Args:
        xml_text: RSS/XML index document
        ignored: Substrings; any link containing one is dropped

    Returns:
        De-duplicated list of page URLs

    Raises:
        ET.ParseError: If the document is not well-formed XML
    """
    root = ET.fromstring(xml_text)
    ignored = tuple(ignored)

    links: List[str] = []
    seen = set()
    skipped = 0

    for item in root.iter():
        if _local_name(item.tag) != 'item':
            continue

        link_element = next(
            (child for child in item if _local_name(child.tag) == 'link'),
            None
        )
        if link_element is None:
            continue

        # Atom-style <link href="..."/> carries the URL in an attribute
        link = (link_element.text or link_element.get('href') or '').strip()
        if not link:
            continue

        if any(pattern in link for pattern in ignored):
            skipped += 1
            continue

        if link in seen:
            continue
        seen.add(link)
        links.append(link)

    logger.debug("parsed feed links", link_count=len(links), ignored_count=skipped)

    return links
