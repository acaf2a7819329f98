"""Pipeline Reporter - Console summary of a reconciliation run

Pure presentation over already-classified results. Groups each tool's
results by the category prefix of the version string:

    "CLI updates - Veracode CLI v2.44.0"  ->  ("CLI updates", "Veracode CLI v2.44.0")
    "2025.4"                              ->  ("General", "2025.4")
"""

from collections import Counter
from typing import Dict, List, Tuple

from pipeline.reconciler import Outcome, ReconcileResult

CATEGORY_SEPARATOR = " - "
DEFAULT_CATEGORY = "General"

DISPLAY_LIMIT = 5
TITLE_MAX_LENGTH = 55

RULE = "=" * 66


def split_version(version: str) -> Tuple[str, str]:
    """Split a version string into (category, display title)"""
    category, separator, title = version.partition(CATEGORY_SEPARATOR)
    if not separator or not category.strip():
        return DEFAULT_CATEGORY, version
    return category.strip(), title


def truncate_title(title: str) -> str:
    if len(title) > TITLE_MAX_LENGTH:
        return title[:TITLE_MAX_LENGTH - 3] + "..."
    return title


class RunReport:
    """Per-tool, per-category tallies of a run, in the order results arrive"""

    def __init__(self):
        self._results: Dict[str, List[ReconcileResult]] = {}

    def start_tool(self, tool: str) -> None:
        """Register a tool so it is reported even when it yields nothing"""
        self._results.setdefault(tool, [])

    def record(self, result: ReconcileResult) -> None:
        self._results.setdefault(result.tool, []).append(result)

    @property
    def tools(self) -> List[str]:
        return list(self._results)

    def tool_counts(self, tool: str) -> Dict[Outcome, int]:
        counts = Counter(result.outcome for result in self._results.get(tool, []))
        return {outcome: counts.get(outcome, 0) for outcome in Outcome}

    def category_counts(self, tool: str) -> Dict[str, Dict[Outcome, int]]:
        """Outcome counts per category, categories sorted by name"""
        by_category: Dict[str, Counter] = {}
        for result in self._results.get(tool, []):
            category, _ = split_version(result.version)
            by_category.setdefault(category, Counter())[result.outcome] += 1

        return {
            category: {outcome: counts.get(outcome, 0) for outcome in Outcome}
            for category, counts in sorted(by_category.items())
        }

    def totals(self) -> Dict[Outcome, int]:
        counts = Counter(
            result.outcome for results in self._results.values() for result in results
        )
        return {outcome: counts.get(outcome, 0) for outcome in Outcome}

    def _changed_titles(self, tool: str, category: str) -> List[Tuple[Outcome, str]]:
        changed = []
        for result in self._results.get(tool, []):
            result_category, title = split_version(result.version)
            if result_category == category and result.outcome is not Outcome.UNCHANGED:
                changed.append((result.outcome, title))
        return changed

    def render(self) -> str:
        """Render the console report"""
        lines: List[str] = []

        for tool in self.tools:
            lines.append(RULE)
            lines.append(f"  {tool}")
            lines.append(RULE)
            lines.append("")

            categories = self.category_counts(tool)
            if not categories:
                lines.append("  (no updates extracted)")
                lines.append("")

            for category, counts in categories.items():
                badges = []
                if counts[Outcome.NEW]:
                    badges.append(f"{counts[Outcome.NEW]} new")
                if counts[Outcome.UPDATED]:
                    badges.append(f"{counts[Outcome.UPDATED]} updated")

                label = f"[{category}]"
                if badges:
                    label += f" ({', '.join(badges)})"
                lines.append(label)

                changed = self._changed_titles(tool, category)
                for outcome, title in changed[:DISPLAY_LIMIT]:
                    marker = "+" if outcome is Outcome.NEW else "~"
                    lines.append(f"    {marker} {truncate_title(title)}")

                remaining = len(changed) - DISPLAY_LIMIT
                if remaining > 0:
                    lines.append(f"    ... and {remaining} more")

                lines.append("")

            counts = self.tool_counts(tool)
            lines.append(
                f"Summary: {counts[Outcome.NEW]} new, "
                f"{counts[Outcome.UPDATED]} updated, "
                f"{counts[Outcome.UNCHANGED]} unchanged"
            )
            lines.append("")

        totals = self.totals()
        lines.append(RULE)
        lines.append(
            f"  Run complete: {len(self.tools)} tool(s), "
            f"{totals[Outcome.NEW]} new, "
            f"{totals[Outcome.UPDATED]} updated, "
            f"{totals[Outcome.UNCHANGED]} unchanged"
        )
        lines.append(RULE)

        return "\n".join(lines)
