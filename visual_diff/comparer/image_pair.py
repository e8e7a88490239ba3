"""Image pair loader — decodes a matched baseline/candidate pair up front."""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path

from PIL import Image

from visual_diff.models.comparison import DimensionMismatch, OutputPaths, ScannedFile
from visual_diff.models.config import IMAGES_DIRNAME

logger = logging.getLogger(__name__)

_PLAIN_SUFFIX = ".png"
_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


def output_stem(name: str) -> str:
    """Derive the base file name used for a pair's report images.

    ``home.png`` maps to ``home``. Any other name (another extension or
    case, or characters that need replacing) gets a short hash of the full
    name after a ``~``, which never appears in a plain stem, so distinct
    names never share output files.
    """
    if name.endswith(_PLAIN_SUFFIX):
        stem = name[:-len(_PLAIN_SUFFIX)]
        if stem and not _UNSAFE_CHARS.search(stem):
            return stem
    base = _UNSAFE_CHARS.sub("-", re.sub(r"\.[^.]*$", "", name)) or "image"
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    return f"{base}~{digest}"


def _decode(path: str) -> Image.Image:
    with Image.open(path) as img:
        return img.convert("RGBA")


class ImagePair:
    """A matched pair whose images are decoded at construction time.

    Missing or undecodable files raise immediately (FileNotFoundError or
    PIL.UnidentifiedImageError) so nothing downstream sees a half-loaded pair.
    """

    def __init__(
        self,
        name: str,
        baseline: ScannedFile,
        candidate: ScannedFile,
        output_dir: str | Path,
    ):
        self.name = name
        self.baseline = baseline
        self.candidate = candidate
        self.output_dir = Path(output_dir)
        self.baseline_image = _decode(baseline.path)
        self.candidate_image = _decode(candidate.path)
        logger.debug(
            "Loaded %s (baseline %s, candidate %s)",
            name, self.baseline_size, self.candidate_size,
        )

    @property
    def width(self) -> int:
        return self.baseline_image.width

    @property
    def height(self) -> int:
        return self.baseline_image.height

    @property
    def baseline_size(self) -> str:
        return f"{self.baseline_image.width}x{self.baseline_image.height}"

    @property
    def candidate_size(self) -> str:
        return f"{self.candidate_image.width}x{self.candidate_image.height}"

    @property
    def baseline_buffer(self) -> bytes:
        return self.baseline_image.tobytes()

    @property
    def candidate_buffer(self) -> bytes:
        return self.candidate_image.tobytes()

    @property
    def has_dimension_mismatch(self) -> bool:
        return self.baseline_image.size != self.candidate_image.size

    @property
    def dimension_mismatch(self) -> DimensionMismatch | None:
        if not self.has_dimension_mismatch:
            return None
        return DimensionMismatch(baseline=self.baseline_size, candidate=self.candidate_size)

    @property
    def images_dir(self) -> Path:
        return self.output_dir / IMAGES_DIRNAME

    @property
    def output_paths(self) -> OutputPaths:
        stem = output_stem(self.name)
        return OutputPaths(
            baseline=self.images_dir / f"{stem}-baseline.png",
            candidate=self.images_dir / f"{stem}-candidate.png",
            diff=self.images_dir / f"{stem}-diff.png",
        )

    def __repr__(self) -> str:
        return f"ImagePair({self.name!r}, {self.baseline_size} vs {self.candidate_size})"
