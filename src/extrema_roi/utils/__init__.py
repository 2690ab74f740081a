"""Utility modules for image processing and file I/O."""

from .file_io import (
    create_output_directory,
    find_metrics_files,
    get_image_files,
    load_image,
    load_metrics_json,
    load_roi_map,
    save_batch_summary,
    save_metrics_json,
    save_regions_csv,
    save_results,
    save_roi_map,
    validate_image_file,
)
from .image_processing import (
    apply_box_blur,
    apply_gaussian_blur,
    crop_image,
    enhance_contrast,
    pad_image,
    to_grayscale,
)

__all__ = [
    # Image processing
    "to_grayscale",
    "enhance_contrast",
    "apply_box_blur",
    "apply_gaussian_blur",
    "pad_image",
    "crop_image",
    # File I/O
    "load_image",
    "save_results",
    "save_roi_map",
    "load_roi_map",
    "save_regions_csv",
    "save_metrics_json",
    "load_metrics_json",
    "save_batch_summary",
    "find_metrics_files",
    "create_output_directory",
    "validate_image_file",
    "get_image_files",
]
