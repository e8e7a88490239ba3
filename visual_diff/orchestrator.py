"""Pipeline orchestrator — coordinates scan, compare, and report stages."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import shutil
import time
from pathlib import Path

from visual_diff.comparer.image_comparer import ComparisonResult, compare_pair
from visual_diff.comparer.image_pair import ImagePair
from visual_diff.models.comparison import MatchedPair
from visual_diff.models.config import IMAGES_DIRNAME, DiffConfig
from visual_diff.reporter.reporter import Reporter
from visual_diff.reporter.summary import summarize
from visual_diff.scanner.file_scanner import scan_directories

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs a baseline-vs-candidate comparison and writes the reports."""

    def __init__(self, config: DiffConfig):
        self.config = config

    @property
    def max_workers(self) -> int:
        return self.config.max_workers or os.cpu_count() or 1

    def run(
        self,
        baseline_dir: str | Path,
        candidate_dir: str | Path,
        output_dir: str | Path | None = None,
    ) -> dict:
        """Execute the complete scan → compare → report pipeline.

        Any scan, decode, or write error propagates and aborts the run
        before reports are written.
        """
        start = time.time()
        out_dir = Path(output_dir or self.config.output_dir)
        logger.info("=== Comparing %s against %s ===", candidate_dir, baseline_dir)

        # Stage 1: Scan
        paired = scan_directories(baseline_dir, candidate_dir, self.config.image_extensions)

        # Stage 2: Compare
        stage_start = time.time()
        self._reset_images_dir(out_dir)
        results = self.compare_pairs(paired.pairs, out_dir)
        logger.info("--- Compared %d pairs in %.1fs ---", len(results), time.time() - stage_start)

        # Stage 3: Report
        reporter = Reporter(self.config)
        reports = reporter.generate_reports(
            results, paired.baseline_only, paired.candidate_only, output_dir=out_dir,
        )

        summary = summarize(results, paired.baseline_only, paired.candidate_only)
        duration = time.time() - start
        if summary.failed:
            logger.warning("Visual diff FAILED: %d different, %d removed",
                           summary.different, summary.removed)
        logger.info("=== Comparison complete in %.1fs ===", duration)

        return {
            "passed": not summary.failed,
            "duration": round(duration, 2),
            "results": {
                "total": summary.total,
                "different": summary.different,
                "removed": summary.removed,
                "added": summary.added,
                "identical": summary.identical,
            },
            "reports": reports,
        }

    def compare_pairs(self, pairs: list[MatchedPair], output_dir: Path) -> list[ComparisonResult]:
        """Load and compare pairs on a bounded pool; results come back in input order.

        Each pair is decoded inside its own task, so at most ``max_workers``
        pairs are held in memory at once.
        """
        if not pairs:
            return []

        results: list[ComparisonResult | None] = [None] * len(pairs)
        total = len(pairs)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            future_to_index = {
                pool.submit(self._compare_one, pair, output_dir): index
                for index, pair in enumerate(pairs)
            }
            try:
                for done, future in enumerate(concurrent.futures.as_completed(future_to_index), 1):
                    index = future_to_index[future]
                    results[index] = future.result()
                    logger.debug("Compared [%d/%d]: %s", done, total, pairs[index].name)
            except Exception:
                for future in future_to_index:
                    future.cancel()
                raise
        return results

    def _compare_one(self, pair: MatchedPair, output_dir: Path) -> ComparisonResult:
        loaded = ImagePair(pair.name, pair.baseline, pair.candidate, output_dir)
        return compare_pair(loaded, self.config.pixel_threshold)

    def _reset_images_dir(self, output_dir: Path) -> None:
        """Clear images left by a previous run so stale files never accumulate."""
        images_dir = output_dir / IMAGES_DIRNAME
        if images_dir.exists():
            logger.debug("Removing previous images in %s", images_dir)
            shutil.rmtree(images_dir)
        images_dir.mkdir(parents=True, exist_ok=True)
