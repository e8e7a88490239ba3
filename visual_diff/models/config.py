"""Configuration models for the visual diff tool."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

HTML_REPORT_FILENAME = "index.html"
MARKDOWN_REPORT_FILENAME = "report.md"
JSON_REPORT_FILENAME = "report.json"
IMAGES_DIRNAME = "images"

# Markdown entries listed per section before "… and N more"
MAX_FILES_SHOWN = 20

DEFAULT_PIXEL_THRESHOLD = 10

SUPPORTED_REPORT_FORMATS = ("html", "markdown", "json")


class DiffConfig(BaseModel):
    # Comparison
    pixel_threshold: int = Field(default=DEFAULT_PIXEL_THRESHOLD, ge=0, le=255)
    max_workers: Optional[int] = Field(default=None, ge=1)

    # Scanning
    image_extensions: list[str] = Field(default_factory=lambda: [".png"])

    # Reporting
    max_files_shown: int = Field(default=MAX_FILES_SHOWN, ge=1)
    report_formats: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_REPORT_FORMATS)
    )
    output_dir: str = "./visual-diff-results"

    @field_validator("image_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("At least one image extension is required")
        return normalized

    @field_validator("report_formats")
    @classmethod
    def check_report_formats(cls, v: list[str]) -> list[str]:
        unknown = [fmt for fmt in v if fmt not in SUPPORTED_REPORT_FORMATS]
        if unknown:
            raise ValueError(
                f"Unsupported report format(s): {', '.join(unknown)} "
                f"(expected one of {', '.join(SUPPORTED_REPORT_FORMATS)})"
            )
        return v

    @classmethod
    def load(cls, path: str | Path) -> "DiffConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
