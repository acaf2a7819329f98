"""
Tests for the run reporter
"""

from pipeline.reconciler import Outcome, ReconcileResult
from pipeline.reporter import RunReport, split_version, truncate_title


def result(tool: str, version: str, outcome: Outcome) -> ReconcileResult:
    return ReconcileResult(outcome=outcome, unique_id="0123456789abcdef", tool=tool, version=version)


class TestSplitVersion:

    def test_category_before_separator(self):
        assert split_version("CLI updates - Veracode CLI v2.44.0") == ("CLI updates", "Veracode CLI v2.44.0")

    def test_only_first_separator_splits(self):
        assert split_version("SCA - Agent - hotfix") == ("SCA", "Agent - hotfix")

    def test_no_separator_is_general(self):
        assert split_version("2025.4") == ("General", "2025.4")

    def test_hyphen_without_spaces_is_general(self):
        assert split_version("v2.44.0-rc1") == ("General", "v2.44.0-rc1")


class TestTruncateTitle:

    def test_short_title_untouched(self):
        assert truncate_title("a" * 55) == "a" * 55

    def test_long_title_truncated(self):
        truncated = truncate_title("a" * 56)
        assert truncated == "a" * 52 + "..."
        assert len(truncated) == 55


class TestRunReport:

    def _report(self) -> RunReport:
        report = RunReport()
        report.record(result("Veracode", "CLI updates - v2", Outcome.NEW))
        report.record(result("Veracode", "CLI updates - v1", Outcome.UNCHANGED))
        report.record(result("Veracode", "SCA updates - Agent 4.2", Outcome.UPDATED))
        report.record(result("SD Elements", "2025.4", Outcome.NEW))
        report.record(result("SD Elements", "2025.3", Outcome.UNCHANGED))
        return report

    def test_tool_counts(self):
        counts = self._report().tool_counts("Veracode")
        assert counts == {Outcome.NEW: 1, Outcome.UPDATED: 1, Outcome.UNCHANGED: 1}

    def test_category_counts_sorted(self):
        categories = self._report().category_counts("Veracode")
        assert list(categories) == ["CLI updates", "SCA updates"]
        assert categories["CLI updates"][Outcome.NEW] == 1
        assert categories["SCA updates"][Outcome.UPDATED] == 1

    def test_category_less_versions_grouped_as_general(self):
        categories = self._report().category_counts("SD Elements")
        assert list(categories) == ["General"]
        assert categories["General"][Outcome.NEW] == 1

    def test_totals(self):
        assert self._report().totals() == {Outcome.NEW: 2, Outcome.UPDATED: 1, Outcome.UNCHANGED: 2}

    def test_render_summary_lines(self):
        text = self._report().render()

        assert "Summary: 1 new, 1 updated, 1 unchanged" in text
        assert "Summary: 1 new, 0 updated, 1 unchanged" in text
        assert "[CLI updates] (1 new)" in text
        assert "[SCA updates] (1 updated)" in text
        assert "2 tool(s), 2 new, 1 updated, 2 unchanged" in text

    def test_render_lists_changed_titles_only(self):
        text = self._report().render()

        assert "+ v2" in text
        assert "~ Agent 4.2" in text
        assert "v1" not in text

    def test_render_caps_listing(self):
        report = RunReport()
        for i in range(8):
            report.record(result("Veracode", f"CLI updates - v{i}", Outcome.NEW))

        text = report.render()

        assert "+ v4" in text
        assert "+ v5" not in text
        assert "... and 3 more" in text

    def test_tool_without_updates_still_reported(self):
        report = RunReport()
        report.start_tool("Veracode")

        text = report.render()

        assert report.tools == ["Veracode"]
        assert "(no updates extracted)" in text
        assert "Summary: 0 new, 0 updated, 0 unchanged" in text
