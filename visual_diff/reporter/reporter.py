"""Report generation orchestration."""

from __future__ import annotations

import logging
from pathlib import Path

from visual_diff.comparer.image_comparer import ComparisonResult
from visual_diff.models.comparison import ScannedFile
from visual_diff.models.config import DiffConfig

from .html_report import generate_html_report
from .json_report import generate_json_report
from .markdown_report import generate_markdown_report

logger = logging.getLogger(__name__)


class Reporter:
    """Generates reports from comparison results."""

    def __init__(self, config: DiffConfig):
        self.config = config

    def generate_reports(
        self,
        results: list[ComparisonResult],
        baseline_only: list[ScannedFile],
        candidate_only: list[ScannedFile],
        output_dir: Path | None = None,
    ) -> dict[str, str]:
        """Generate all configured report formats. Returns format -> file path."""
        out_dir = Path(output_dir or self.config.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        generated = {}
        logger.debug("Report output directory: %s", out_dir)

        if "html" in self.config.report_formats:
            path = generate_html_report(results, baseline_only, candidate_only, out_dir)
            generated["html"] = str(path)
            logger.info("HTML report: %s", path)

        if "markdown" in self.config.report_formats:
            path = generate_markdown_report(
                results, baseline_only, candidate_only, out_dir,
                max_files=self.config.max_files_shown,
            )
            generated["markdown"] = str(path)
            logger.info("Markdown report: %s", path)

        if "json" in self.config.report_formats:
            path = generate_json_report(results, baseline_only, candidate_only, out_dir)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)

        return generated
