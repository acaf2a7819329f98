"""
Pydantic schemas for extractor outputs - runtime validation at boundaries.

These schemas validate data from vendor extractors before it reaches the
reconciler. Catches empty titles and timezone-shifted dates early instead of
hashing them into a bogus identity.
"""

from datetime import date as date_type, datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class DraftUpdate(BaseModel):
    """Unreconciled release note produced by an extractor (no identity yet)"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str
    date: date_type
    description: str = ""
    link: str

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Ensure version/title is a non-empty string"""
        if not v or not v.strip():
            raise ValueError("version cannot be empty")
        return v.strip()

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        """Reduce datetimes to their UTC calendar day (time of day is meaningless)"""
        if isinstance(v, datetime):
            if v.tzinfo is not None:
                v = v.astimezone(timezone.utc)
            return v.date()
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("link")
    @classmethod
    def validate_link(cls, v: str) -> str:
        """Ensure link is non-empty string"""
        if not v or not v.strip():
            raise ValueError("link cannot be empty")
        return v.strip()
