"""
Tests for the single-image pipeline
"""

import cv2
import numpy as np
import pytest

from extrema_roi.core.analysis import analyze_image_file, prepare_image
from extrema_roi.core.errors import CapacityError
from extrema_roi.core.options import ExtremaOptions, save_options
from extrema_roi.utils.file_io import load_metrics_json, load_roi_map


class TestAnalyzeImageFile:
    """Test analyze_image_file end to end"""

    def test_outputs(self, tmp_path, peak_image_file):
        """All result files are written and referenced"""
        out_dir = tmp_path / "out"

        results = analyze_image_file(str(peak_image_file), output_dir=str(out_dir))

        assert results["positive_count"] == 1
        assert results["negative_count"] == 0
        assert results["offset"] == (0, 0)
        assert results["options"] == ExtremaOptions().to_dict()
        for name in ("peak_roimap.npz", "peak_regions.csv", "peak_metrics.json", "peak_overlay.png"):
            assert (out_dir / name).exists()
        assert results["overlay_image"].endswith("peak_overlay.png")

        saved = load_metrics_json(str(out_dir / "peak_metrics.json"))
        assert saved["positive_count"] == 1
        assert saved["csv_regions"].endswith("peak_regions.csv")

        roi_map = load_roi_map(str(out_dir / "peak_roimap.npz"))
        assert (roi_map.width, roi_map.height) == (7, 7)
        assert (roi_map.labels == 1).all()

    def test_no_overlay_and_debug(self, tmp_path, peak_image_file):
        """Overlay can be skipped and debug images added"""
        results = analyze_image_file(str(peak_image_file), output_dir=str(tmp_path), no_overlay=True, save_debug=True)

        assert "overlay_image" not in results
        assert not (tmp_path / "peak_overlay.png").exists()
        assert (tmp_path / "peak_grey.png").exists()
        assert (tmp_path / "peak_labels.png").exists()

    def test_invert(self, tmp_path, peak_image_file):
        """The dark background touches the border, so no minimum survives"""
        results = analyze_image_file(str(peak_image_file), output_dir=str(tmp_path), invert=True)

        assert results["region_count"] == 0
        assert results["options"]["invert"] is True
        assert results["polarity"] == "minima"

    def test_crop(self, tmp_path, peak_image_file):
        """Cropping keeps the offset and shrinks the map"""
        results = analyze_image_file(str(peak_image_file), output_dir=str(tmp_path), crop=(1, 1, 6, 6))

        assert results["offset"] == (1, 1)
        assert (results["width"], results["height"]) == (6, 6)
        assert results["positive_count"] == 1

    def test_colour_image(self, tmp_path):
        """Colour images are converted to grey first"""
        image = np.zeros((5, 5, 3), dtype=np.uint8)
        image[2, 2] = (255, 255, 255)
        path = tmp_path / "colour.png"
        cv2.imwrite(str(path), image)

        results = analyze_image_file(str(path), output_dir=str(tmp_path / "out"))

        assert results["positive_count"] == 1
        assert results["labelled_fraction"] == pytest.approx(1.0)

    def test_options_file(self, tmp_path, peak_image_file):
        """Options from a file override keyword flags"""
        options_path = tmp_path / "options.json"
        save_options(str(options_path), ExtremaOptions(only_top=True))

        results = analyze_image_file(
            str(peak_image_file), output_dir=str(tmp_path / "out"), options_from=str(options_path)
        )

        assert results["options"]["only_top"] is True
        assert results["largest_area_px"] == 9

    def test_missing_file(self, tmp_path):
        """Unreadable images raise FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            analyze_image_file(str(tmp_path / "missing.png"), output_dir=str(tmp_path))

    def test_capacity_error_propagates(self, tmp_path, peak_image_file):
        """Queue overflow aborts the analysis"""
        with pytest.raises(CapacityError):
            analyze_image_file(str(peak_image_file), output_dir=str(tmp_path), max_queue_size=3)


class TestPrepareImage:
    """Test grey conversion and filters"""

    def test_grey_passthrough(self, peak_grid):
        """Without filters a grey image is copied unchanged"""
        grey = prepare_image(peak_grid)

        np.testing.assert_array_equal(grey, peak_grid)
        assert grey is not peak_grid

    def test_filters(self):
        """Filters keep shape and dtype"""
        image = np.random.default_rng(0).integers(0, 255, size=(32, 32), dtype=np.uint8)

        grey = prepare_image(image, blur_size=3, gaussian_sigma=1.0, clahe=True)

        assert grey.shape == (32, 32)
        assert grey.dtype == np.uint8

    def test_box_blur_flattens_noise(self):
        """A box blur on a constant image changes nothing"""
        image = np.full((10, 10), 50, dtype=np.uint8)

        assert (prepare_image(image, blur_size=5) == 50).all()
