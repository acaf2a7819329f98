"""
Tests for the version-anchor (SD Elements style) release notes parser
"""

from datetime import date

from vendors.adapters.parsers.version_anchor_parser import (
    FALLBACK_DESCRIPTION,
    build_description,
    estimate_date_from_version,
    parse_version_anchor_page,
)

PAGE_URL = "https://docs.sdelements.com/master/guide/docs/release_notes/"

ARCHIVE_PAGE = """
<html><body><div class="document">
  <h1>Release Notes</h1>
  <h2 id="overview">Overview<a class="headerlink" href="#overview">Anchor</a></h2>
  <p>January 1, 2025</p>

  <h2 id="20254">2025.4<a class="headerlink" href="#20254">Anchor</a></h2>
  <p>New features and enhancements</p>
  <ul>
    <li><p>Threat modeling diagrams</p><p>Longer explanation.</p></li>
    <li><p>Jira Cloud sync</p></li>
    <li><p>A feature title that is clearly much longer than fifty characters</p></li>
    <li><p>SAML improvements</p></li>
  </ul>

  <h2 id="20253">2025.3<a class="headerlink" href="#20253">Anchor</a></h2>
  <p>August 20, 2025</p>
  <ul>
    <li>Plain bullet one
    continued on a second line</li>
  </ul>

  <h2 id="20257">2025.7<a class="headerlink" href="#20257">Anchor</a></h2>
  <p>No date here.</p>
</div></body></html>
"""


class TestEstimateDateFromVersion:

    def test_fourth_quarter_is_mid_november(self):
        assert estimate_date_from_version("2025.4") == date(2025, 11, 15)

    def test_quarter_months(self):
        assert estimate_date_from_version("2024.1") == date(2024, 2, 15)
        assert estimate_date_from_version("2024.2") == date(2024, 5, 15)
        assert estimate_date_from_version("2024.3") == date(2024, 8, 15)

    def test_unknown_quarter_is_none(self):
        assert estimate_date_from_version("2025.7") is None

    def test_no_version_number_is_none(self):
        assert estimate_date_from_version("Overview") is None


class TestBuildDescription:

    def test_no_features_uses_fallback(self):
        assert build_description([]) == FALLBACK_DESCRIPTION

    def test_first_three_joined(self):
        assert build_description(["A", "B", "C"]) == "A; B; C"

    def test_remaining_count_appended(self):
        assert build_description(["A", "B", "C", "D", "E"]) == "A; B; C (+2 more)"

    def test_long_feature_truncated(self):
        feature = "x" * 60
        assert build_description([feature]) == "x" * 47 + "..."


class TestParseVersionAnchorPage:

    def _by_version(self):
        return {u['version']: u for u in parse_version_anchor_page(ARCHIVE_PAGE, PAGE_URL)}

    def test_only_numeric_anchors_are_releases(self):
        assert set(self._by_version()) == {"2025.4", "2025.3"}

    def test_missing_date_estimated_from_quarter(self):
        assert self._by_version()["2025.4"]['date'] == date(2025, 11, 15)

    def test_date_paragraph_preferred(self):
        assert self._by_version()["2025.3"]['date'] == date(2025, 8, 20)

    def test_features_after_marker_summarized(self):
        description = self._by_version()["2025.4"]['description']
        assert description == (
            "Threat modeling diagrams; Jira Cloud sync; "
            "A feature title that is clearly much longer tha... (+1 more)"
        )

    def test_fallback_list_uses_first_line(self):
        assert self._by_version()["2025.3"]['description'] == "Plain bullet one"

    def test_link_targets_anchor(self):
        assert self._by_version()["2025.4"]['link'] == f"{PAGE_URL}#20254"

    def test_page_without_versions(self):
        assert parse_version_anchor_page("<h2 id='intro'>Intro</h2>", PAGE_URL) == []
