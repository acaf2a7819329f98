"""Date and text helpers shared by the release-note parsers"""

import re
from datetime import date
from typing import Optional

FULL_MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
}

ABBREVIATED_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7,
    "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

# "January 20, 2026", "Sept 3 2025", "Jan. 5, 2024"; anything may follow the year
MONTH_DAY_YEAR_PATTERN = re.compile(r'^([A-Za-z]+)\.?\s+(\d{1,2})(,?)\s+(\d{4})(?!\d)')

# Artifacts documentation generators append to heading text
ZERO_WIDTH_CHARS = re.compile(r"[\u200b\u200c\u200d\ufeff]")


def parse_month_day_year(
    text: str, allow_abbreviated: bool = False, require_comma: bool = False
) -> Optional[date]:
    """Parse a leading "Month D, YYYY" date into a calendar date

    The comma after the day is optional unless require_comma is set.

    Returns a plain date (no time, no timezone), so the result never shifts
    with the process timezone. Returns None for anything unparseable,
    including impossible days like "February 30, 2025".
    """
    if not text:
        return None

    match = MONTH_DAY_YEAR_PATTERN.match(clean_text(text))
    if not match:
        return None

    month_name, day_str, comma, year_str = match.groups()
    if require_comma and not comma:
        return None
    month_name = month_name.lower()

    month = FULL_MONTHS.get(month_name)
    if month is None and allow_abbreviated:
        month = ABBREVIATED_MONTHS.get(month_name)
    if month is None:
        return None

    try:
        return date(int(year_str), month, int(day_str))
    except ValueError:
        return None


def clean_text(text: str) -> str:
    """Collapse whitespace and drop zero-width characters"""
    if not text:
        return ""
    return " ".join(ZERO_WIDTH_CHARS.sub("", text).split())
