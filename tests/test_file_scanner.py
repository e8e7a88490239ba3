"""Tests for the file scanner."""

from pathlib import Path

import pytest

from visual_diff.models.comparison import MatchedPair
from visual_diff.scanner.file_scanner import scan_directories, scan_directory

from conftest import write_png


class TestScanDirectory:
    """Tests for scan_directory."""

    def test_lists_images_sorted_by_name(self, baseline_dir: Path):
        for name in ["c.png", "a.png", "b.png"]:
            write_png(baseline_dir / name)

        files = scan_directory(baseline_dir)
        assert [f.name for f in files] == ["a.png", "b.png", "c.png"]
        assert files[0].path == str((baseline_dir / "a.png").resolve())

    def test_ignores_other_extensions_and_subdirectories(self, baseline_dir: Path):
        write_png(baseline_dir / "shot.png")
        (baseline_dir / "notes.txt").write_text("hello")
        (baseline_dir / "nested").mkdir()
        write_png(baseline_dir / "nested" / "deep.png")

        files = scan_directory(baseline_dir)
        assert [f.name for f in files] == ["shot.png"]

    def test_extension_match_is_case_insensitive(self, baseline_dir: Path):
        write_png(baseline_dir / "upper.PNG")
        assert [f.name for f in scan_directory(baseline_dir)] == ["upper.PNG"]

    def test_custom_extensions(self, baseline_dir: Path):
        write_png(baseline_dir / "a.png")
        (baseline_dir / "b.jpg").write_bytes(b"")
        files = scan_directory(baseline_dir, extensions=[".jpg"])
        assert [f.name for f in files] == ["b.jpg"]

    def test_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            scan_directory(tmp_path / "nope")

    def test_file_instead_of_directory_raises(self, tmp_path: Path):
        path = write_png(tmp_path / "file.png")
        with pytest.raises(NotADirectoryError):
            scan_directory(path)


class TestScanDirectories:
    """Tests for pairing baseline and candidate listings."""

    def test_partitions_pairs_and_singletons(self, baseline_dir: Path, candidate_dir: Path):
        for name in ["same.png", "changed.png", "removed.png"]:
            write_png(baseline_dir / name)
        for name in ["same.png", "changed.png", "added.png"]:
            write_png(candidate_dir / name)

        paired = scan_directories(baseline_dir, candidate_dir)

        assert [p.name for p in paired.pairs] == ["changed.png", "same.png"]
        assert [f.name for f in paired.baseline_only] == ["removed.png"]
        assert [f.name for f in paired.candidate_only] == ["added.png"]

    def test_pair_paths_point_into_each_directory(self, baseline_dir: Path, candidate_dir: Path):
        write_png(baseline_dir / "home.png")
        write_png(candidate_dir / "home.png")

        paired = scan_directories(baseline_dir, candidate_dir)
        assert paired.pairs == [
            MatchedPair(
                name="home.png",
                baseline_path=str((baseline_dir / "home.png").resolve()),
                candidate_path=str((candidate_dir / "home.png").resolve()),
            )
        ]

    def test_matching_is_case_sensitive(self, baseline_dir: Path, candidate_dir: Path):
        write_png(baseline_dir / "Home.png")
        write_png(candidate_dir / "home.png")

        paired = scan_directories(baseline_dir, candidate_dir)
        assert paired.pairs == []
        assert [f.name for f in paired.baseline_only] == ["Home.png"]
        assert [f.name for f in paired.candidate_only] == ["home.png"]

    def test_partition_covers_union_without_overlap(self, baseline_dir: Path, candidate_dir: Path):
        for name in ["a.png", "b.png", "c.png"]:
            write_png(baseline_dir / name)
        for name in ["b.png", "c.png", "d.png", "e.png"]:
            write_png(candidate_dir / name)

        paired = scan_directories(baseline_dir, candidate_dir)
        names = (
            [p.name for p in paired.pairs]
            + [f.name for f in paired.baseline_only]
            + [f.name for f in paired.candidate_only]
        )
        assert sorted(names) == ["a.png", "b.png", "c.png", "d.png", "e.png"]
        assert len(names) == len(set(names))

    def test_empty_directories(self, baseline_dir: Path, candidate_dir: Path):
        paired = scan_directories(baseline_dir, candidate_dir)
        assert paired.pairs == []
        assert paired.baseline_only == []
        assert paired.candidate_only == []

    def test_missing_candidate_directory_fails_whole_scan(self, baseline_dir: Path, tmp_path: Path):
        write_png(baseline_dir / "a.png")
        with pytest.raises(FileNotFoundError):
            scan_directories(baseline_dir, tmp_path / "missing")

    def test_matched_pair_exposes_scanned_files(self):
        pair = MatchedPair(name="x.png", baseline_path="/b/x.png", candidate_path="/c/x.png")
        assert pair.baseline.name == "x.png"
        assert pair.baseline.path == "/b/x.png"
        assert pair.candidate.path == "/c/x.png"
