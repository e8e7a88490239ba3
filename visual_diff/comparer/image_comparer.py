"""Image comparer — classifies a loaded pair and writes its report images."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image, ImageChops

from visual_diff.models.comparison import DimensionMismatch
from visual_diff.models.config import DEFAULT_PIXEL_THRESHOLD

from .image_pair import ImagePair

logger = logging.getLogger(__name__)

DIFF_HIGHLIGHT = (255, 0, 0)
# Fraction of white blended over the grayscale baseline behind highlights
DIFF_BACKGROUND_FADE = 0.8


@dataclass(frozen=True)
class ComparisonResult:
    pair: ImagePair
    has_difference: bool
    diff_percentage: float
    dimension_mismatch: DimensionMismatch | None = None


def difference_mask(baseline: Image.Image, candidate: Image.Image, threshold: int) -> Image.Image:
    """Return an "L" mask that is 255 where any RGBA channel differs by more than threshold."""
    delta = ImageChops.difference(baseline, candidate)
    channels = delta.split()
    largest = channels[0]
    for channel in channels[1:]:
        largest = ImageChops.lighter(largest, channel)
    return largest.point(lambda v: 255 if v > threshold else 0)


def render_diff_image(baseline: Image.Image, mask: Image.Image) -> Image.Image:
    """Highlight differing pixels over a faded grayscale copy of the baseline."""
    background = baseline.convert("L").convert("RGB")
    white = Image.new("RGB", background.size, (255, 255, 255))
    diff = Image.blend(background, white, DIFF_BACKGROUND_FADE)
    diff.paste(DIFF_HIGHLIGHT, (0, 0, diff.width, diff.height), mask)
    return diff


def _write_pair_images(pair: ImagePair) -> None:
    paths = pair.output_paths
    paths.baseline.parent.mkdir(parents=True, exist_ok=True)
    pair.baseline_image.save(paths.baseline, format="PNG")
    pair.candidate_image.save(paths.candidate, format="PNG")


def compare_pair(pair: ImagePair, pixel_threshold: int = DEFAULT_PIXEL_THRESHOLD) -> ComparisonResult:
    """Compare a loaded pair pixel by pixel.

    Mismatched dimensions skip the pixel pass entirely and count as 100%
    different. Differing pairs get baseline/candidate copies under the
    pair's images directory; a diff image is written only when the
    dimensions match.
    """
    mismatch = pair.dimension_mismatch
    if mismatch is not None:
        logger.debug("%s: dimension mismatch %s -> %s", pair.name, mismatch.baseline, mismatch.candidate)
        _write_pair_images(pair)
        return ComparisonResult(
            pair=pair,
            has_difference=True,
            diff_percentage=100.0,
            dimension_mismatch=mismatch,
        )

    mask = difference_mask(pair.baseline_image, pair.candidate_image, pixel_threshold)
    total_pixels = pair.width * pair.height
    differing_pixels = mask.histogram()[255]
    diff_percentage = (differing_pixels / total_pixels) * 100 if total_pixels else 0.0
    has_difference = differing_pixels > 0

    if has_difference:
        _write_pair_images(pair)
        render_diff_image(pair.baseline_image, mask).save(pair.output_paths.diff, format="PNG")
        logger.debug("%s: %d/%d pixels differ (%.2f%%)",
                     pair.name, differing_pixels, total_pixels, diff_percentage)
    else:
        logger.debug("%s: identical", pair.name)

    return ComparisonResult(
        pair=pair,
        has_difference=has_difference,
        diff_percentage=diff_percentage,
    )
