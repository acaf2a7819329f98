"""
Tests for extractor output validation and the persisted Update model
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from database.models import Update
from exceptions import ValidationError
from vendors.schemas import DraftUpdate


class TestDraftUpdate:

    def test_valid_draft(self):
        draft = DraftUpdate(version=" v1 ", date=date(2026, 1, 20), description=" text ", link="https://x")
        assert draft.version == "v1"
        assert draft.description == "text"

    def test_description_optional(self):
        assert DraftUpdate(version="v1", date=date(2026, 1, 20), link="https://x").description == ""

    def test_datetime_reduced_to_utc_day(self):
        evening_west = datetime(2026, 1, 19, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        draft = DraftUpdate(version="v1", date=evening_west, link="https://x")
        assert draft.date == date(2026, 1, 20)

    def test_empty_version_rejected(self):
        with pytest.raises(PydanticValidationError):
            DraftUpdate(version="  ", date=date(2026, 1, 20), link="https://x")

    def test_empty_link_rejected(self):
        with pytest.raises(PydanticValidationError):
            DraftUpdate(version="v1", date=date(2026, 1, 20), link="")

    def test_unknown_fields_rejected(self):
        with pytest.raises(PydanticValidationError):
            DraftUpdate(version="v1", date=date(2026, 1, 20), link="https://x", tool="Veracode")


class TestUpdateModel:

    def _update(self, **overrides) -> Update:
        fields = dict(
            unique_id="0123456789abcdef",
            tool="Veracode",
            version="v1",
            date=date(2026, 1, 20),
            description="text",
            link="https://x",
        )
        fields.update(overrides)
        return Update(**fields)

    def test_invalid_unique_id_rejected(self):
        with pytest.raises(ValidationError):
            self._update(unique_id="not-a-hash")

    def test_content_differs(self):
        update = self._update()
        assert not update.content_differs("text", "https://x", "v1")
        assert update.content_differs("other", "https://x", "v1")
        assert update.content_differs("text", "https://y", "v1")
        assert update.content_differs("text", "https://x", "v2")

    def test_to_dict_serializes_dates(self):
        data = self._update(created_at=datetime(2026, 1, 21, 8, 0)).to_dict()
        assert data["date"] == "2026-01-20"
        assert data["created_at"] == "2026-01-21T08:00:00"
