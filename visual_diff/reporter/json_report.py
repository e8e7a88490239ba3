"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from visual_diff.comparer.image_comparer import ComparisonResult
from visual_diff.models.comparison import ScannedFile
from visual_diff.models.config import IMAGES_DIRNAME, JSON_REPORT_FILENAME

from .summary import summarize


def _result_entry(r: ComparisonResult) -> dict:
    entry = {
        "name": r.pair.name,
        "has_difference": r.has_difference,
        "diff_percentage": r.diff_percentage,
        "dimension_mismatch": r.dimension_mismatch.model_dump() if r.dimension_mismatch else None,
        "images": None,
    }
    if r.has_difference:
        paths = r.pair.output_paths
        images = {
            "baseline": f"{IMAGES_DIRNAME}/{paths.baseline.name}",
            "candidate": f"{IMAGES_DIRNAME}/{paths.candidate.name}",
        }
        if not r.dimension_mismatch:
            images["diff"] = f"{IMAGES_DIRNAME}/{paths.diff.name}"
        entry["images"] = images
    return entry


def generate_json_report(
    results: list[ComparisonResult],
    baseline_only: list[ScannedFile],
    candidate_only: list[ScannedFile],
    output_dir: Path,
) -> Path:
    """Write a machine-readable JSON report."""
    summary = summarize(results, baseline_only, candidate_only)
    report = {
        "passed": not summary.failed,
        "summary": {
            "total": summary.total,
            "different": summary.different,
            "removed": summary.removed,
            "added": summary.added,
            "identical": summary.identical,
        },
        "results": [_result_entry(r) for r in results],
        "removed": [f.name for f in baseline_only],
        "added": [f.name for f in candidate_only],
    }

    output_path = Path(output_dir) / JSON_REPORT_FILENAME
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
    return output_path
