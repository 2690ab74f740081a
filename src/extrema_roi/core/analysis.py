"""End-to-end ROI extraction for one image file."""

import logging
import os
from pathlib import Path
from typing import Any

from extrema_roi.utils.file_io import load_image, save_results
from extrema_roi.utils.image_processing import (
    apply_box_blur,
    apply_gaussian_blur,
    crop_image,
    enhance_contrast,
    to_grayscale,
)

from .extrema import create_roi_map_from_extrema
from .metrics import calculate_map_metrics, calculate_region_metrics
from .options import resolve_options

logger = logging.getLogger(__name__)


def analyze_image_file(image_path: str, output_dir: str = "out", **kwargs) -> dict[str, Any]:
    """Extract the extrema ROIs of an image file and save the results.

    Args:
        image_path: Path to input image
        output_dir: Output directory for results
        **kwargs: Analysis parameters (crop, blur_size, gaussian_sigma, clahe,
            allow_corner, only_top, invert, max_queue_size, options_from,
            no_overlay, save_debug)

    Returns:
        Dictionary with complete analysis results

    Raises:
        FileNotFoundError: If the image cannot be read
        PreconditionError: If the prepared image cannot be processed
        CapacityError: If a traversal queue overflows
    """
    image = load_image(image_path)
    logger.info("Loaded %s (%s, %s)", image_path, "x".join(map(str, image.shape)), image.dtype)

    os.makedirs(output_dir, exist_ok=True)
    stem = Path(image_path).stem

    # Handle cropping
    offset = (0, 0)
    if kwargs.get("crop"):
        image, offset = crop_image(image, kwargs["crop"])

    grey = prepare_image(image, **kwargs)

    options = resolve_options(**kwargs)
    roi_map = create_roi_map_from_extrema(
        grey,
        allow_corner=options.allow_corner,
        only_top=options.only_top,
        invert=options.invert,
        max_queue_size=options.max_queue_size,
    )
    logger.info(
        "%s: %d maxima, %d minima, %.1f%% labelled",
        stem,
        roi_map.positive_count,
        roi_map.negative_count,
        100.0 * roi_map.labelled_fraction(),
    )

    regions = calculate_region_metrics(roi_map, grey)

    results = {
        "image_path": os.path.abspath(image_path),
        "offset": offset,
        "options": options.to_dict(),
        "polarity": options.polarity.value,
        "options_from": kwargs.get("options_from"),
        **calculate_map_metrics(roi_map, regions),
    }

    save_results(results, regions, roi_map, output_dir, stem)

    if kwargs.get("save_debug", False):
        from .visualization import save_debug_images

        save_debug_images(grey, roi_map, output_dir, stem)

    if not kwargs.get("no_overlay", False):
        from .visualization import create_roi_overlay

        results["overlay_image"] = create_roi_overlay(grey, roi_map, output_dir, stem, regions=regions)

    return results


def prepare_image(image, **kwargs):
    """Reduce an image to one channel and apply the requested filters.

    Filters run in this order: box blur (``blur_size``), gaussian blur
    (``gaussian_sigma``), CLAHE (``clahe``).
    """
    grey = to_grayscale(image)

    if kwargs.get("blur_size"):
        grey = apply_box_blur(grey, kwargs["blur_size"])

    if kwargs.get("gaussian_sigma"):
        sigma = kwargs["gaussian_sigma"]
        # Kernel covers +-3 sigma
        grey = apply_gaussian_blur(grey, kernel_size=2 * int(round(3 * sigma)) + 1, sigma=sigma)

    if kwargs.get("clahe", False):
        grey = enhance_contrast(grey)

    return grey
