"""File scanner — matches baseline and candidate screenshots by file name."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from visual_diff.models.comparison import MatchedPair, PairedFiles, ScannedFile

logger = logging.getLogger(__name__)


def scan_directory(directory: str | Path, extensions: Iterable[str] = (".png",)) -> list[ScannedFile]:
    """List image files directly inside a directory, sorted by name.

    Raises FileNotFoundError / NotADirectoryError when the directory is
    unusable; permission errors from the listing propagate unchanged.
    """
    directory = Path(directory)
    if not directory.exists():
        raise FileNotFoundError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    allowed = {ext.lower() for ext in extensions}
    files = [
        ScannedFile(name=entry.name, path=str(entry.resolve()))
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() in allowed
    ]
    files.sort(key=lambda f: f.name)
    logger.debug("Scanned %s: %d image files", directory, len(files))
    return files


def scan_directories(
    baseline_dir: str | Path,
    candidate_dir: str | Path,
    extensions: Iterable[str] = (".png",),
) -> PairedFiles:
    """Pair files from the two directories by exact (case-sensitive) name."""
    extensions = tuple(extensions)
    baseline_files = scan_directory(baseline_dir, extensions)
    candidate_files = scan_directory(candidate_dir, extensions)

    candidates_by_name = {f.name: f for f in candidate_files}
    baseline_names = {f.name for f in baseline_files}

    pairs = []
    baseline_only = []
    for f in baseline_files:
        match = candidates_by_name.get(f.name)
        if match is None:
            baseline_only.append(f)
        else:
            pairs.append(MatchedPair(
                name=f.name,
                baseline_path=f.path,
                candidate_path=match.path,
            ))
    candidate_only = [f for f in candidate_files if f.name not in baseline_names]

    logger.info(
        "Matched %d pairs (%d baseline-only, %d candidate-only)",
        len(pairs), len(baseline_only), len(candidate_only),
    )
    return PairedFiles(
        pairs=pairs,
        baseline_only=baseline_only,
        candidate_only=candidate_only,
    )
