"""File I/O utilities for saving extraction results and data."""

import csv
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from extrema_roi.core.roi_map import ROIMap

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif"}

REGION_FIELDS = [
    "roi_id",
    "polarity",
    "area_px",
    "centroid_x",
    "centroid_y",
    "bbox_x",
    "bbox_y",
    "bbox_width",
    "bbox_height",
    "extremum_x",
    "extremum_y",
    "extremum_value",
    "intensity_min",
    "intensity_max",
    "intensity_mean",
    "touches_border",
]


def load_image(file_path: str) -> np.ndarray:
    """Read an image file keeping its bit depth and channels.

    Args:
        file_path: Path to image file

    Returns:
        Image array as returned by OpenCV (BGR channel order)

    Raises:
        FileNotFoundError: If the file cannot be read as an image
    """
    image = cv2.imread(str(file_path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise FileNotFoundError(f"Could not read image: {file_path}")
    return image


def save_results(
    metrics: dict[str, Any],
    regions: list[dict[str, Any]],
    roi_map: ROIMap,
    output_dir: str,
    stem: str,
) -> dict[str, str]:
    """Save complete extraction results to files.

    Args:
        metrics: Analysis metrics dictionary
        regions: Per-region statistics
        roi_map: Extraction result
        output_dir: Output directory path
        stem: Output file stem

    Returns:
        Dictionary with paths to saved files
    """
    output_paths = {}

    output_paths["roi_map"] = save_roi_map(roi_map, output_dir, stem)
    metrics["roi_map"] = output_paths["roi_map"]

    output_paths["csv_regions"] = save_regions_csv(regions, output_dir, stem)
    metrics["csv_regions"] = output_paths["csv_regions"]

    output_paths["metrics_json"] = save_metrics_json(metrics, output_dir, stem)

    return output_paths


def save_roi_map(roi_map: ROIMap, output_dir: str, stem: str) -> str:
    """Save the label grid and region counts as a compressed ``.npz`` archive.

    Returns:
        Absolute path to saved archive
    """
    npz_path = os.path.join(output_dir, f"{stem}_roimap.npz")
    np.savez_compressed(
        npz_path,
        labels=roi_map.labels,
        positive_count=roi_map.positive_count,
        negative_count=roi_map.negative_count,
    )
    return os.path.abspath(npz_path)


def load_roi_map(file_path: str) -> ROIMap:
    """Load an ROI map written by save_roi_map.

    Raises:
        FileNotFoundError: If file doesn't exist
        KeyError: If the archive lacks one of the expected arrays
    """
    with np.load(file_path) as data:
        labels = data["labels"]
        return ROIMap(
            labels=labels,
            positive_count=int(data["positive_count"]),
            negative_count=int(data["negative_count"]),
            width=labels.shape[1],
            height=labels.shape[0],
        )


def save_regions_csv(regions: list[dict[str, Any]], output_dir: str, stem: str) -> str:
    """Save per-region statistics to a CSV file.

    The header is written even when there are no regions.

    Args:
        regions: Output of calculate_region_metrics
        output_dir: Output directory path
        stem: Output file stem

    Returns:
        Absolute path to saved CSV file
    """
    csv_path = os.path.join(output_dir, f"{stem}_regions.csv")

    with open(csv_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=REGION_FIELDS)
        writer.writeheader()
        writer.writerows(regions)

    return os.path.abspath(csv_path)


def save_metrics_json(metrics: dict[str, Any], output_dir: str, stem: str) -> str:
    """Save analysis metrics to JSON file.

    Args:
        metrics: Dictionary of analysis metrics
        output_dir: Output directory path
        stem: Output file stem

    Returns:
        Absolute path to saved JSON file
    """
    json_path = os.path.join(output_dir, f"{stem}_metrics.json")

    with open(json_path, "w") as f:
        json.dump(metrics, f, indent=2, default=_json_serializer)

    return os.path.abspath(json_path)


def load_metrics_json(file_path: str) -> dict[str, Any]:
    """Load analysis metrics from JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    with open(file_path) as f:
        return json.load(f)


def save_batch_summary(
    results_list: list[dict[str, Any]], output_dir: str, filename: str = "batch_summary.json"
) -> str:
    """Save summary of batch extraction results.

    Args:
        results_list: List of analysis result dictionaries
        output_dir: Output directory path
        filename: Output filename

    Returns:
        Absolute path to saved summary file
    """
    summary = {
        "total_images": len(results_list),
        "successful_analyses": len([r for r in results_list if not r.get("error")]),
        "failed_analyses": len([r for r in results_list if r.get("error")]),
        "results": results_list,
    }

    summary_path = os.path.join(output_dir, filename)

    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=2, default=_json_serializer)

    return os.path.abspath(summary_path)


def find_metrics_files(directory: str, pattern: str = "*_metrics.json") -> list[Path]:
    """Find all metrics JSON files in a directory."""
    search_dir = Path(directory)
    return sorted(search_dir.glob(pattern))


def create_output_directory(output_dir: str, exist_ok: bool = True) -> str:
    """Create output directory if it doesn't exist.

    Returns:
        Absolute path to output directory
    """
    os.makedirs(output_dir, exist_ok=exist_ok)
    return os.path.abspath(output_dir)


def validate_image_file(file_path: str) -> bool:
    """Validate that file exists and has a supported image extension."""
    if not os.path.isfile(file_path):
        return False

    return Path(file_path).suffix.lower() in IMAGE_EXTENSIONS


def get_image_files(directory: str, recursive: bool = False) -> list[str]:
    """Get list of image files in directory.

    Args:
        directory: Directory to search
        recursive: Whether to search subdirectories

    Returns:
        Sorted list of image file paths
    """
    search_dir = Path(directory)

    if not search_dir.exists():
        return []

    candidates = search_dir.rglob("*") if recursive else search_dir.glob("*")
    return sorted(str(f) for f in candidates if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS)


def _json_serializer(obj):
    """Custom JSON serializer for numpy types and other non-serializable objects."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, Enum):
        return obj.value
    elif hasattr(obj, "__dict__"):
        return obj.__dict__
    else:
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
