"""Run summary — counts and pass/fail verdict derived from comparison results."""

from __future__ import annotations

from dataclasses import dataclass

from visual_diff.comparer.image_comparer import ComparisonResult
from visual_diff.models.comparison import ScannedFile


@dataclass(frozen=True)
class ReportSummary:
    different: int
    removed: int
    added: int
    identical: int

    @property
    def total(self) -> int:
        return self.different + self.removed + self.added + self.identical

    @property
    def failed(self) -> bool:
        # Added files alone never fail a run
        return self.different > 0 or self.removed > 0

    @property
    def status_text(self) -> str:
        return "FAILED" if self.failed else "PASSED"


def summarize(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
) -> ReportSummary:
    different = sum(1 for r in results if r.has_difference)
    return ReportSummary(
        different=different,
        removed=len(baseline_only),
        added=len(candidate_only),
        identical=len(results) - different,
    )
