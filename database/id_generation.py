"""
ID Generation - Deterministic identifiers for release-note updates

Single source of truth for update identity. No extractor generates IDs.

Update ID Pattern:
- {16-char-sha256} of "{tool}:{YYYY-MM-DD}:{version}"
- e.g. tool="Veracode", date=2026-01-20, version="CLI updates - Veracode CLI v2.44.0"

Design Philosophy:
- IDs are deterministic: same inputs always produce same ID
- Two drafts with identical tool+date+version collide on purpose, so
  repeated runs over the same page never ingest duplicates
- Description and link are NOT part of identity: changing them is an
  update of the same record, not a new record

Collision risk:
16 hex chars is 64 bits. Birthday bound for a 50% collision is ~4 billion
records; the corpus is a few thousand release notes per vendor. Accepted
risk, not a guaranteed-unique invariant. Widen UPDATE_ID_LENGTH (and
migrate stored ids) if the corpus grows by orders of magnitude.
"""

import hashlib
from datetime import date, datetime, timezone
from typing import Union

UPDATE_ID_LENGTH = 16


def format_update_date(value: Union[date, datetime]) -> str:
    """Render the day-granularity date used in identity hashing

    Datetimes are reduced to their UTC calendar day so the same release note
    hashes identically regardless of the process timezone.

    Examples:
        >>> format_update_date(date(2026, 1, 20))
        '2026-01-20'

        >>> format_update_date(datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc))
        '2026-01-20'
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    return value.isoformat()


def generate_update_id(tool: str, update_date: Union[date, datetime], version: str) -> str:
    """Generate deterministic update ID

    Args:
        tool: Extractor tool name (e.g., "Veracode", "SD Elements")
        update_date: Release date (day granularity)
        version: Vendor version/title string, including any category prefix

    Returns:
        First 16 hex chars of SHA256("{tool}:{YYYY-MM-DD}:{version}")

    Raises:
        ValueError: If tool or version is empty
    """
    if not tool:
        raise ValueError("tool is required to generate an update id")
    if not version:
        raise ValueError("version is required to generate an update id")

    key = f"{tool}:{format_update_date(update_date)}:{version}"
    return hashlib.sha256(key.encode('utf-8')).hexdigest()[:UPDATE_ID_LENGTH]


def validate_update_id(unique_id: str) -> bool:
    """Validate update ID format: exactly 16 lowercase hex characters"""
    if not unique_id or len(unique_id) != UPDATE_ID_LENGTH:
        return False

    if unique_id != unique_id.lower():
        return False

    try:
        int(unique_id, 16)
        return True
    except ValueError:
        return False
