"""Data structures produced by the file scanner and pair loader."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ScannedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str


class MatchedPair(BaseModel):
    """A baseline/candidate file pair sharing the same name."""
    model_config = ConfigDict(frozen=True)

    name: str
    baseline_path: str
    candidate_path: str

    @property
    def baseline(self) -> ScannedFile:
        return ScannedFile(name=self.name, path=self.baseline_path)

    @property
    def candidate(self) -> ScannedFile:
        return ScannedFile(name=self.name, path=self.candidate_path)


class PairedFiles(BaseModel):
    model_config = ConfigDict(frozen=True)

    pairs: list[MatchedPair] = Field(default_factory=list)
    baseline_only: list[ScannedFile] = Field(default_factory=list)
    candidate_only: list[ScannedFile] = Field(default_factory=list)


class DimensionMismatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    baseline: str  # "WxH"
    candidate: str  # "WxH"


class OutputPaths(BaseModel):
    model_config = ConfigDict(frozen=True)

    baseline: Path
    candidate: Path
    diff: Path
