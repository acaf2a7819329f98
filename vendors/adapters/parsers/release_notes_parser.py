"""
Release Notes Parser - Extract dated release notes from documentation pages

Handles the Docusaurus-style layout used by docs.veracode.com/updates:

    <h1>CLI updates</h1>
    <h2>January 20, 2026</h2>
    <h3>Veracode CLI v2.44.0<a class="hash-link" aria-label="Direct link to ...">#</a></h3>
    <p>Adds support for ...</p>
    <h3>Another note</h3>
    <h2>January 6, 2026</h2>
    ...

Each h3 under a date h2 becomes one release note titled
"<page title> - <h3 title>", linked to the page URL (not the anchor).
"""

import re
from typing import Dict, Any, List

from bs4 import BeautifulSoup, Tag

from config import get_logger
from vendors.utils.dates import clean_text, parse_month_day_year

logger = get_logger(__name__).bind(component="vendor")

DIRECT_LINK_SUFFIX = re.compile(r'Direct link to.*$', re.IGNORECASE)
TRAILING_HASH = re.compile(r'#$')


def clean_heading_title(text: str) -> str:
    """Strip anchor boilerplate from a heading title

    Examples:
        "Veracode CLI v2.44.0Direct link to Veracode CLI v2.44.0" -> "Veracode CLI v2.44.0"
        "Pipeline Scan 24.1#" -> "Pipeline Scan 24.1"
    """
    title = clean_text(text)
    title = DIRECT_LINK_SUFFIX.sub('', title).strip()
    title = TRAILING_HASH.sub('', title).strip()
    return title


def parse_release_notes_page(html: str, url: str, allow_abbreviated: bool = False) -> List[Dict[str, Any]]:
    """Parse one category page into raw update dicts

    Args:
        html: Page HTML
        url: Page URL (used as every record's link)
        allow_abbreviated: Also accept "Jan", "Sept", ... in date headings

    Returns:
        [{'version': str, 'date': date, 'description': str, 'link': str}, ...]
    """
    soup = BeautifulSoup(html, 'html.parser')

    title_element = soup.find('h1')
    page_title = clean_text(title_element.get_text()) if title_element else ""

    updates: List[Dict[str, Any]] = []
    skipped_headings = 0

    for date_heading in soup.find_all('h2'):
        heading_date = parse_month_day_year(
            clean_heading_title(date_heading.get_text()),
            allow_abbreviated=allow_abbreviated,
            require_comma=not allow_abbreviated,
        )
        if not heading_date:
            skipped_headings += 1
            continue

        for sibling in date_heading.find_next_siblings():
            if sibling.name == 'h2':
                break
            if sibling.name != 'h3':
                continue

            title = clean_heading_title(sibling.get_text())
            if not title:
                continue

            description = ""
            next_element = sibling.find_next_sibling()
            if isinstance(next_element, Tag) and next_element.name == 'p':
                description = clean_text(next_element.get_text())

            updates.append({
                'version': f"{page_title} - {title}",
                'date': heading_date,
                'description': description,
                'link': url,
            })

    logger.debug(
        "parsed release notes page",
        url=url,
        page_title=page_title,
        update_count=len(updates),
        non_date_headings=skipped_headings,
    )

    return updates
