"""Markdown report — a bounded summary sized for pull-request comments."""

from __future__ import annotations

import re
from pathlib import Path

from visual_diff.comparer.image_comparer import ComparisonResult
from visual_diff.models.comparison import ScannedFile
from visual_diff.models.config import MARKDOWN_REPORT_FILENAME, MAX_FILES_SHOWN

from .summary import summarize


_TABLE_SPECIALS = re.compile(r"([\\`*_\[\]<>|~])")


def _table_cell(text: str) -> str:
    return _TABLE_SPECIALS.sub(r"\\\1", text)


def _code_span(text: str) -> str:
    """Wrap ``text`` in a code span whose fence outlasts any backticks inside it."""
    runs = re.findall(r"`+", text)
    if not runs:
        return f"`{text}`"
    fence = "`" * (max(len(run) for run in runs) + 1)
    return f"{fence} {text} {fence}"


def _more_line(total: int, max_files: int) -> list[str]:
    hidden = total - max_files
    if hidden <= 0:
        return []
    return ["", f"… and {hidden} more"]


def _name_list(title: str, names: list[str], max_files: int) -> list[str]:
    lines = [f"#### {title} ({len(names)})", ""]
    lines.extend(f"- {_code_span(name)}" for name in names[:max_files])
    lines.extend(_more_line(len(names), max_files))
    lines.append("")
    return lines


def _differences_table(differences: list[ComparisonResult], max_files: int) -> list[str]:
    lines = [
        f"#### Differences ({len(differences)})",
        "",
        "| File | Diff % | Notes |",
        "|------|--------|-------|",
    ]
    for r in differences[:max_files]:
        notes = ""
        if r.dimension_mismatch:
            notes = (f"⚠️ Dimension mismatch ({r.dimension_mismatch.baseline} → "
                     f"{r.dimension_mismatch.candidate})")
        lines.append(f"| {_table_cell(r.pair.name)} | {r.diff_percentage:.2f}% | {notes} |")
    lines.extend(_more_line(len(differences), max_files))
    lines.append("")
    return lines


def build_markdown(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
    max_files: int = MAX_FILES_SHOWN,
) -> str:
    """Build the Markdown report text.

    Each section lists at most ``max_files`` entries; its header always
    carries the full count.
    """
    summary = summarize(results, baseline_only, candidate_only)
    differences = [r for r in results if r.has_difference]
    identical = [r for r in results if not r.has_difference]
    status_emoji = "❌" if summary.failed else "✅"

    lines = [f"### {status_emoji} Visual Diff Report — {summary.status_text}", ""]

    parts = []
    if summary.different:
        parts.append(f"**{summary.different}** different")
    if summary.removed:
        parts.append(f"**{summary.removed}** removed")
    if summary.added:
        parts.append(f"**{summary.added}** added")
    if summary.identical:
        parts.append(f"**{summary.identical}** identical")
    summary_line = f"**{summary.total}** images compared"
    if parts:
        summary_line += ": " + " · ".join(parts)
    lines += [summary_line, ""]

    if summary.total:
        lines += ["<details>", "<summary>Details</summary>", ""]
        if differences:
            lines += _differences_table(differences, max_files)
        if baseline_only:
            lines += _name_list("Removed Files", [f.name for f in baseline_only], max_files)
        if candidate_only:
            lines += _name_list("Added Files", [f.name for f in candidate_only], max_files)
        if identical:
            lines += _name_list("Identical Files", [r.pair.name for r in identical], max_files)
        lines += ["</details>", ""]

    return "\n".join(lines)


def generate_markdown_report(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
    output_dir: Path,
    max_files: int = MAX_FILES_SHOWN,
) -> Path:
    """Write report.md into the output directory and return its path."""
    output_path = Path(output_dir) / MARKDOWN_REPORT_FILENAME
    markdown = build_markdown(results, baseline_only, candidate_only, max_files)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(markdown)
    return output_path
