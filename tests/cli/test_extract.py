"""
Tests for the roi-extract command
"""

import json
import shutil

import pytest

from extrema_roi.cli.extract import create_argument_parser, expand_image_paths, main
from extrema_roi.core.options import load_options


class TestArgumentParser:
    """Test argument parsing"""

    def test_defaults(self):
        """Defaults match a plain maxima extraction"""
        args = create_argument_parser().parse_args(["image.png"])

        assert args.images == ["image.png"]
        assert args.out_dir == "out"
        assert not args.no_corner
        assert not args.only_top
        assert not args.invert
        assert args.max_queue_size is None

    def test_flags(self):
        """Extraction flags are parsed"""
        args = create_argument_parser().parse_args(
            ["a.png", "b.png", "--no-corner", "--invert", "--max-queue-size", "50", "--blur-size", "3"]
        )

        assert args.images == ["a.png", "b.png"]
        assert args.no_corner
        assert args.invert
        assert args.max_queue_size == 50
        assert args.blur_size == 3


class TestExpandImagePaths:
    """Test wildcard expansion"""

    def test_wildcards(self, tmp_path, peak_image_file):
        """Patterns expand, plain paths pass through"""
        shutil.copy(peak_image_file, tmp_path / "second.png")

        paths = expand_image_paths([str(tmp_path / "*.png"), "plain.png"])

        assert [p.split("/")[-1] for p in paths] == ["peak.png", "second.png", "plain.png"]

    def test_no_match(self, tmp_path, capsys):
        """Unmatched patterns are reported"""
        assert expand_image_paths([str(tmp_path / "*.bmp")]) == []
        assert "No files match" in capsys.readouterr().out


class TestMain:
    """Test the command end to end"""

    def test_single_image(self, tmp_path, peak_image_file, capsys):
        """Results are written and summarized"""
        out_dir = tmp_path / "out"

        main([str(peak_image_file), "--out-dir", str(out_dir)])

        assert (out_dir / "peak_metrics.json").exists()
        assert (out_dir / "peak_regions.csv").exists()
        assert (out_dir / "peak_overlay.png").exists()
        assert not (out_dir / "batch_summary.json").exists()
        output = capsys.readouterr().out
        assert "Extracting:" in output
        assert "Regions: 1 maxima, 0 minima" in output

    def test_quiet_prints_json(self, tmp_path, peak_image_file, capsys):
        """A single image in quiet mode prints its results as JSON"""
        main([str(peak_image_file), "--out-dir", str(tmp_path / "out"), "--quiet", "--no-overlay"])

        results = json.loads(capsys.readouterr().out)
        assert results["positive_count"] == 1
        assert results["success"] is True

    def test_batch_and_options(self, tmp_path, peak_image_file):
        """Several images produce a batch summary and options can be saved"""
        second = tmp_path / "second.png"
        shutil.copy(peak_image_file, second)
        out_dir = tmp_path / "out"
        options_path = tmp_path / "options.json"

        main(
            [
                str(peak_image_file),
                str(second),
                "--out-dir",
                str(out_dir),
                "--only-top",
                "--save-options",
                str(options_path),
                "--quiet",
            ]
        )

        with open(out_dir / "batch_summary.json") as f:
            summary = json.load(f)
        assert summary["total_images"] == 2
        assert summary["failed_analyses"] == 0

        options, data = load_options(str(options_path))
        assert options.only_top is True
        assert data["source_image"] == str(second)

    def test_missing_image(self, tmp_path):
        """Missing images stop the command with status 1"""
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.png"), "--out-dir", str(tmp_path / "out")])

        assert exc_info.value.code == 1

    def test_bad_crop(self, tmp_path, peak_image_file):
        """Malformed crop strings stop the command with status 1"""
        with pytest.raises(SystemExit) as exc_info:
            main([str(peak_image_file), "--crop", "1,2,3"])

        assert exc_info.value.code == 1

    def test_failure_exit_code(self, tmp_path, peak_image_file, capsys):
        """An extraction error is reported and the exit status is 1"""
        with pytest.raises(SystemExit) as exc_info:
            main([str(peak_image_file), "--out-dir", str(tmp_path / "out"), "--max-queue-size", "2"])

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "Error extracting" in output
        assert "Failed: 1" in output
