"""
Tests for the dated release-notes page parser and date helpers
"""

from datetime import date

from vendors.adapters.parsers.release_notes_parser import (
    clean_heading_title,
    parse_release_notes_page,
)
from vendors.utils.dates import clean_text, parse_month_day_year

PAGE_URL = "https://docs.veracode.com/updates/r/Veracode_CLI_Updates"

CATEGORY_PAGE = """
<html><body>
<article>
  <h1>CLI updates</h1>
  <p>Intro paragraph that is not a release note.</p>
  <h2>January 20, 2026</h2>
  <h3>Veracode CLI v2.44.0<a class="hash-link" aria-label="Direct link to Veracode CLI v2.44.0" href="#cli-2440">#</a></h3>
  <p>Adds support for &amp; improves scanning of <b>container</b> images.</p>
  <h3>Veracode CLI v2.43.1\u200b</h3>
  <ul><li>No paragraph directly after this heading</li></ul>
  <h2>Related links</h2>
  <h3>Should be ignored</h3>
  <h2>January 6, 2026</h2>
  <h3>Veracode CLI v2.43.0</h3>
  <p>Bug fixes.</p>
</article>
</body></html>
"""


class TestParseMonthDayYear:

    def test_full_month_date(self):
        assert parse_month_day_year("January 20, 2026") == date(2026, 1, 20)

    def test_trailing_text_allowed(self):
        assert parse_month_day_year("March 3, 2025 - hotfix") == date(2025, 3, 3)

    def test_text_glued_to_year_allowed(self):
        assert parse_month_day_year("January 20, 2026Direct link to January 20, 2026") == date(2026, 1, 20)
        assert parse_month_day_year("January 20, 20261") is None

    def test_abbreviated_rejected_by_default(self):
        assert parse_month_day_year("Jan 20, 2026") is None

    def test_abbreviated_accepted_when_allowed(self):
        assert parse_month_day_year("Jan 20, 2026", allow_abbreviated=True) == date(2026, 1, 20)
        assert parse_month_day_year("Sept 3, 2025", allow_abbreviated=True) == date(2025, 9, 3)
        assert parse_month_day_year("Dec. 1 2024", allow_abbreviated=True) == date(2024, 12, 1)

    def test_comma_required_when_asked(self):
        assert parse_month_day_year("January 20 2026") == date(2026, 1, 20)
        assert parse_month_day_year("January 20 2026", require_comma=True) is None
        assert parse_month_day_year("January 20, 2026", require_comma=True) == date(2026, 1, 20)

    def test_impossible_day_is_none(self):
        assert parse_month_day_year("February 30, 2025") is None

    def test_non_date_is_none(self):
        assert parse_month_day_year("Related links") is None
        assert parse_month_day_year("") is None

    def test_zero_width_characters_ignored(self):
        assert parse_month_day_year("\u200bJanuary 20, 2026\u200b") == date(2026, 1, 20)


class TestCleanText:

    def test_collapses_whitespace(self):
        assert clean_text("  a\n\t b  ") == "a b"

    def test_drops_zero_width(self):
        assert clean_text("v2.44.0\u200b") == "v2.44.0"


class TestCleanHeadingTitle:

    def test_strips_direct_link_suffix(self):
        assert clean_heading_title("Veracode CLI v2.44.0Direct link to Veracode CLI v2.44.0") == "Veracode CLI v2.44.0"

    def test_strips_trailing_hash(self):
        assert clean_heading_title("Pipeline Scan 24.1#") == "Pipeline Scan 24.1"


class TestParseReleaseNotesPage:

    def test_extracts_notes_under_date_headings(self):
        updates = parse_release_notes_page(CATEGORY_PAGE, PAGE_URL)

        assert [u['version'] for u in updates] == [
            "CLI updates - Veracode CLI v2.44.0",
            "CLI updates - Veracode CLI v2.43.1",
            "CLI updates - Veracode CLI v2.43.0",
        ]

    def test_dates_come_from_enclosing_heading(self):
        updates = parse_release_notes_page(CATEGORY_PAGE, PAGE_URL)

        assert updates[0]['date'] == date(2026, 1, 20)
        assert updates[1]['date'] == date(2026, 1, 20)
        assert updates[2]['date'] == date(2026, 1, 6)

    def test_description_is_next_paragraph_with_entities_decoded(self):
        updates = parse_release_notes_page(CATEGORY_PAGE, PAGE_URL)

        assert updates[0]['description'] == "Adds support for & improves scanning of container images."
        assert updates[1]['description'] == ""

    def test_links_point_at_page(self):
        updates = parse_release_notes_page(CATEGORY_PAGE, PAGE_URL)
        assert {u['link'] for u in updates} == {PAGE_URL}

    def test_non_date_sections_skipped(self):
        updates = parse_release_notes_page(CATEGORY_PAGE, PAGE_URL)
        assert not any("Should be ignored" in u['version'] for u in updates)

    def test_abbreviated_headings_need_flag(self):
        html = "<h1>SCA</h1><h2>Sept 3, 2025</h2><h3>Agent 4.2</h3><p>Faster.</p>"

        assert parse_release_notes_page(html, PAGE_URL) == []

        updates = parse_release_notes_page(html, PAGE_URL, allow_abbreviated=True)
        assert len(updates) == 1
        assert updates[0]['date'] == date(2025, 9, 3)
        assert updates[0]['version'] == "SCA - Agent 4.2"

    def test_date_heading_with_anchor_boilerplate(self):
        html = (
            "<h1>CLI updates</h1>"
            "<h2>January 20, 2026Direct link to January 20, 2026</h2>"
            "<h3>Veracode CLI v2.44.0Direct link to Veracode CLI v2.44.0</h3>"
            "<p>Adds X.</p>"
        )

        for allow_abbreviated in (False, True):
            updates = parse_release_notes_page(html, PAGE_URL, allow_abbreviated=allow_abbreviated)
            assert len(updates) == 1
            assert updates[0]["date"] == date(2026, 1, 20)
            assert updates[0]["version"] == "CLI updates - Veracode CLI v2.44.0"
            assert updates[0]["description"] == "Adds X."

    def test_static_headings_need_comma(self):
        html = "<h1>SCA</h1><h2>September 3 2025</h2><h3>Agent 4.2</h3><p>Faster.</p>"

        assert parse_release_notes_page(html, PAGE_URL) == []
        assert len(parse_release_notes_page(html, PAGE_URL, allow_abbreviated=True)) == 1

    def test_page_without_dates_yields_nothing(self):
        assert parse_release_notes_page("<h1>Empty</h1><p>Nothing yet.</p>", PAGE_URL) == []
