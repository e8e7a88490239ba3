"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from PIL import Image

from visual_diff.comparer.image_pair import ImagePair
from visual_diff.models.comparison import ScannedFile
from visual_diff.models.config import DiffConfig

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


# ============================================================================
# Helper Functions
# ============================================================================


def write_png(path: Path, size: tuple[int, int] = (4, 4), color=RED) -> Path:
    """Write a solid-color RGBA PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


def write_png_with_patch(
    path: Path,
    size: tuple[int, int],
    background,
    patch_box: tuple[int, int, int, int],
    patch_color,
) -> Path:
    """Write a PNG with a rectangular patch (left, top, right, bottom) in another color."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGBA", size, background)
    img.paste(patch_color, patch_box)
    img.save(path, format="PNG")
    return path


# ============================================================================
# Directory Fixtures
# ============================================================================


@pytest.fixture
def baseline_dir(tmp_path: Path) -> Path:
    path = tmp_path / "baseline"
    path.mkdir()
    return path


@pytest.fixture
def candidate_dir(tmp_path: Path) -> Path:
    path = tmp_path / "candidate"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "results"
    path.mkdir()
    return path


# ============================================================================
# Pair Fixtures
# ============================================================================


@pytest.fixture
def make_pair(tmp_path: Path, output_dir: Path):
    """Factory that writes two solid PNGs and loads them as an ImagePair."""
    sources = tmp_path / "sources"

    def _make(
        name: str,
        baseline_color=RED,
        candidate_color=RED,
        baseline_size: tuple[int, int] = (4, 4),
        candidate_size: tuple[int, int] | None = None,
    ) -> ImagePair:
        baseline_path = write_png(sources / "baseline" / name, baseline_size, baseline_color)
        candidate_path = write_png(
            sources / "candidate" / name, candidate_size or baseline_size, candidate_color
        )
        return ImagePair(
            name,
            ScannedFile(name=name, path=str(baseline_path)),
            ScannedFile(name=name, path=str(candidate_path)),
            output_dir,
        )

    return _make


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def diff_config(output_dir: Path) -> DiffConfig:
    """Single-worker config writing into the test output directory."""
    return DiffConfig(
        pixel_threshold=10,
        max_files_shown=5,
        max_workers=1,
        output_dir=str(output_dir),
    )
