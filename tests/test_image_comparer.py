"""Tests for pixel comparison and diff image output."""

from pathlib import Path

import pytest
from PIL import Image

from visual_diff.comparer.image_comparer import (
    DIFF_HIGHLIGHT,
    ComparisonResult,
    compare_pair,
    difference_mask,
)
from visual_diff.comparer.image_pair import ImagePair
from visual_diff.models.comparison import DimensionMismatch, ScannedFile

from conftest import BLUE, RED, WHITE, write_png_with_patch


class TestIdenticalPairs:
    """Pairs without differing pixels."""

    def test_identical_pair(self, make_pair):
        pair = make_pair("same.png", RED, RED)
        result = compare_pair(pair)

        assert result.has_difference is False
        assert result.diff_percentage == 0.0
        assert result.dimension_mismatch is None

    def test_identical_pair_writes_no_images(self, make_pair):
        pair = make_pair("same.png", RED, RED)
        compare_pair(pair)

        paths = pair.output_paths
        assert not paths.baseline.exists()
        assert not paths.candidate.exists()
        assert not paths.diff.exists()

    def test_small_changes_within_threshold_are_ignored(self, make_pair):
        pair = make_pair("noise.png", (100, 100, 100, 255), (105, 100, 96, 255))
        assert compare_pair(pair, pixel_threshold=10).has_difference is False
        assert compare_pair(pair, pixel_threshold=4).has_difference is True


class TestDifferingPairs:
    """Dimension-matched pairs with differences."""

    def test_fully_different_pair(self, make_pair):
        result = compare_pair(make_pair("changed.png", RED, BLUE))
        assert result.has_difference is True
        assert result.diff_percentage == 100.0

    def test_partial_difference_percentage(self, tmp_path: Path, output_dir: Path):
        # 10x10 image with a 3x3 patch changed -> 9%
        baseline = write_png_with_patch(tmp_path / "b.png", (10, 10), WHITE, (0, 0, 3, 3), WHITE)
        candidate = write_png_with_patch(tmp_path / "c.png", (10, 10), WHITE, (0, 0, 3, 3), BLUE)
        pair = ImagePair(
            "patch.png",
            ScannedFile(name="patch.png", path=str(baseline)),
            ScannedFile(name="patch.png", path=str(candidate)),
            output_dir,
        )

        result = compare_pair(pair)
        assert result.has_difference is True
        assert result.diff_percentage == pytest.approx(9.0)

    def test_percentage_is_not_rounded(self, tmp_path: Path, output_dir: Path):
        # 1 pixel out of 3x3 -> 11.111...%
        baseline = write_png_with_patch(tmp_path / "b.png", (3, 3), WHITE, (0, 0, 1, 1), WHITE)
        candidate = write_png_with_patch(tmp_path / "c.png", (3, 3), WHITE, (0, 0, 1, 1), RED)
        pair = ImagePair(
            "one.png",
            ScannedFile(name="one.png", path=str(baseline)),
            ScannedFile(name="one.png", path=str(candidate)),
            output_dir,
        )

        result = compare_pair(pair)
        assert result.diff_percentage == pytest.approx(100 / 9)
        assert result.diff_percentage != round(result.diff_percentage, 2)

    def test_writes_baseline_candidate_and_diff(self, make_pair):
        pair = make_pair("changed.png", RED, BLUE)
        compare_pair(pair)

        paths = pair.output_paths
        assert paths.baseline.exists()
        assert paths.candidate.exists()
        assert paths.diff.exists()
        with Image.open(paths.candidate) as img:
            assert img.convert("RGBA").getpixel((0, 0)) == BLUE

    def test_diff_image_highlights_changed_pixels(self, tmp_path: Path, output_dir: Path):
        baseline = write_png_with_patch(tmp_path / "b.png", (4, 4), WHITE, (0, 0, 1, 1), WHITE)
        candidate = write_png_with_patch(tmp_path / "c.png", (4, 4), WHITE, (0, 0, 1, 1), BLUE)
        pair = ImagePair(
            "corner.png",
            ScannedFile(name="corner.png", path=str(baseline)),
            ScannedFile(name="corner.png", path=str(candidate)),
            output_dir,
        )
        compare_pair(pair)

        with Image.open(pair.output_paths.diff) as diff:
            assert diff.size == (4, 4)
            assert diff.getpixel((0, 0)) == DIFF_HIGHLIGHT
            assert diff.getpixel((3, 3)) != DIFF_HIGHLIGHT

    def test_comparison_is_deterministic(self, make_pair):
        pair = make_pair("changed.png", RED, BLUE)
        first = compare_pair(pair)
        first_bytes = pair.output_paths.diff.read_bytes()
        second = compare_pair(pair)

        assert first.diff_percentage == second.diff_percentage
        assert pair.output_paths.diff.read_bytes() == first_bytes


class TestDimensionMismatch:
    """Pairs whose sizes differ."""

    def test_mismatch_is_maximally_different(self, make_pair):
        pair = make_pair("mismatched.png", RED, RED, baseline_size=(10, 20), candidate_size=(20, 30))
        result = compare_pair(pair)

        assert result.has_difference is True
        assert result.diff_percentage == 100.0
        assert result.dimension_mismatch == DimensionMismatch(baseline="10x20", candidate="20x30")

    def test_mismatch_writes_no_diff_image(self, make_pair):
        pair = make_pair("mismatched.png", RED, RED, baseline_size=(10, 20), candidate_size=(20, 30))
        compare_pair(pair)

        paths = pair.output_paths
        assert paths.baseline.exists()
        assert paths.candidate.exists()
        assert not paths.diff.exists()


class TestDifferenceMask:
    """Tests for the per-pixel threshold mask."""

    def test_alpha_only_change_counts(self):
        a = Image.new("RGBA", (2, 1), (0, 0, 0, 255))
        b = Image.new("RGBA", (2, 1), (0, 0, 0, 0))
        mask = difference_mask(a, b, threshold=10)
        assert mask.histogram()[255] == 2

    def test_threshold_is_exclusive(self):
        a = Image.new("RGBA", (1, 1), (100, 100, 100, 255))
        b = Image.new("RGBA", (1, 1), (110, 100, 100, 255))
        assert difference_mask(a, b, threshold=10).histogram()[255] == 0
        assert difference_mask(a, b, threshold=9).histogram()[255] == 1


class TestComparisonResult:
    def test_result_is_immutable(self, make_pair):
        result = ComparisonResult(pair=make_pair("x.png"), has_difference=False, diff_percentage=0.0)
        with pytest.raises(AttributeError):
            result.diff_percentage = 5.0
