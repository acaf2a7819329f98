"""
Version Anchor Parser - Extract releases from year-indexed archive pages

Handles the docs.sdelements.com release notes layout:

    <h2 id="20254">2025.4<a class="headerlink">Anchor</a></h2>
    <p>December 10, 2025</p>
    <p>New features and enhancements</p>
    <ul>
      <li><p>Feature title</p><p>Longer explanation</p></li>
      ...
    </ul>
    <h2 id="20253">2025.3 ...

One record per version heading, linked to "<page>#<anchor id>".
"""

import re
from datetime import date
from typing import Dict, Any, List, Optional

from bs4 import BeautifulSoup, Tag

from config import get_logger
from vendors.utils.dates import clean_text, parse_month_day_year

logger = get_logger(__name__).bind(component="vendor")

VERSION_ANCHOR_PATTERN = re.compile(r'^\d{4,5}$')
VERSION_QUARTER_PATTERN = re.compile(r'(\d{4})\.(\d+)')

FEATURES_MARKER = "New features and enhancements"
FALLBACK_DESCRIPTION = "New release with improvements and fixes."

MAX_FEATURES = 5
DESCRIPTION_FEATURES = 3
FEATURE_MAX_LENGTH = 50
FALLBACK_FEATURE_MAX_LENGTH = 100

# Quarterly release -> month used when the page carries no release date
QUARTER_MONTHS = {1: 2, 2: 5, 3: 8, 4: 11}
ESTIMATED_DAY = 15


def estimate_date_from_version(version: str) -> Optional[date]:
    """Estimate a release date from a "YYYY.Q" version string

    Examples:
        >>> estimate_date_from_version("2025.4")
        datetime.date(2025, 11, 15)

        >>> estimate_date_from_version("2025.7") is None
        True
    """
    match = VERSION_QUARTER_PATTERN.search(version or "")
    if not match:
        return None

    year = int(match.group(1))
    month = QUARTER_MONTHS.get(int(match.group(2)))
    if month is None:
        return None

    return date(year, month, ESTIMATED_DAY)


def _section(heading: Tag):
    """Yield the tag siblings after a version heading up to the next h2"""
    for sibling in heading.find_next_siblings():
        if sibling.name == 'h2':
            return
        yield sibling


def _find_release_date(heading: Tag) -> Optional[date]:
    for sibling in _section(heading):
        if sibling.name != 'p':
            continue
        parsed = parse_month_day_year(sibling.get_text())
        if parsed:
            return parsed
    return None


def _first_paragraph_text(li: Tag) -> str:
    paragraph = li.find('p', recursive=False)
    return clean_text(paragraph.get_text()) if paragraph else ""


def extract_features(heading: Tag) -> List[str]:
    """Harvest up to five feature titles for a version section

    Prefers the list following the "New features and enhancements" paragraph;
    otherwise falls back to the first bullet list in the section.
    """
    features: List[str] = []
    found_marker = False

    for element in _section(heading):
        if element.name == 'p' and FEATURES_MARKER in element.get_text():
            found_marker = True
            feature_list = element.find_next_sibling()
            if isinstance(feature_list, Tag) and feature_list.name == 'ul':
                for li in feature_list.find_all('li', recursive=False)[:MAX_FEATURES]:
                    title = _first_paragraph_text(li)
                    if title:
                        features.append(title)
                break

        if not found_marker and element.name == 'ul':
            for li in element.find_all('li', recursive=False)[:MAX_FEATURES]:
                title = _first_paragraph_text(li)
                if not title:
                    lines = li.get_text().strip().split('\n')
                    title = clean_text(lines[0]) if lines else ""
                if title and len(title) < FALLBACK_FEATURE_MAX_LENGTH:
                    features.append(title)
            if features:
                break

    return features


def build_description(features: List[str]) -> str:
    """Summarize features: first three (50 chars max each), plus a "(+N more)" tail"""
    if not features:
        return FALLBACK_DESCRIPTION

    main_features = [
        feature if len(feature) <= FEATURE_MAX_LENGTH else feature[:FEATURE_MAX_LENGTH - 3] + '...'
        for feature in features[:DESCRIPTION_FEATURES]
    ]
    description = '; '.join(main_features)

    if len(features) > DESCRIPTION_FEATURES:
        description += f" (+{len(features) - DESCRIPTION_FEATURES} more)"

    return description


def parse_version_anchor_page(html: str, url: str) -> List[Dict[str, Any]]:
    """Parse one archive page into raw update dicts

    Args:
        html: Page HTML
        url: Page URL; each record links to "<url>#<anchor id>"

    Returns:
        [{'version': str, 'date': date, 'description': str, 'link': str}, ...]
    """
    soup = BeautifulSoup(html, 'html.parser')
    updates: List[Dict[str, Any]] = []

    for heading in soup.find_all('h2', id=True):
        anchor_id = heading.get('id')
        if not anchor_id or not VERSION_ANCHOR_PATTERN.match(anchor_id):
            continue

        version = clean_text(heading.get_text().replace('Anchor', '', 1))
        if not version:
            continue

        release_date = _find_release_date(heading)
        if not release_date:
            release_date = estimate_date_from_version(version)
            if not release_date:
                logger.debug("no date found for version", url=url, version=version)
                continue

        updates.append({
            'version': version,
            'date': release_date,
            'description': build_description(extract_features(heading)),
            'link': f"{url}#{anchor_id}",
        })

    logger.debug("parsed version anchor page", url=url, update_count=len(updates))

    return updates
