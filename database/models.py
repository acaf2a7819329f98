"""
Database Models for releasewatch

Pydantic dataclasses with runtime validation for persisted entities.
"""

from typing import Optional
from datetime import date as date_type, datetime
from pydantic.dataclasses import dataclass
from dataclasses import asdict

from database.id_generation import validate_update_id

# Fields the query API never exposes
INTERNAL_FIELDS = ("unique_id", "updated_at")


@dataclass
class Update:
    """Persisted release-note update

    Identity:
    - unique_id: sha256(tool:date:version)[:16], immutable once assigned
    - created_at: first-seen timestamp, set once on insert

    Content (mutable, overwritten in place when a later run differs):
    - description, link, version
    """

    unique_id: str
    tool: str
    version: str
    date: date_type
    description: str = ""
    link: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate update data after initialization"""
        if not validate_update_id(self.unique_id):
            from exceptions import ValidationError
            raise ValidationError(
                f"Invalid unique_id: {self.unique_id}",
                field="unique_id",
                value=self.unique_id
            )

    def content_differs(self, description: str, link: str, version: str) -> bool:
        """True when any of the mutable content fields differ"""
        return (
            self.description != description
            or self.link != link
            or self.version != version
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        data["date"] = self.date.isoformat()
        if self.created_at:
            data["created_at"] = self.created_at.isoformat()
        if self.updated_at:
            data["updated_at"] = self.updated_at.isoformat()
        return data

    def to_public_dict(self) -> dict:
        """Dictionary for the query API with internal fields stripped"""
        data = self.to_dict()
        for field_name in INTERNAL_FIELDS:
            data.pop(field_name, None)
        return data
