"""Visualization utilities for creating ROI overlays and debug images."""

import os
from typing import Any

import cv2
import numpy as np
from skimage.color import label2rgb

from .roi_map import ROIMap


def create_roi_overlay(
    image: np.ndarray,
    roi_map: ROIMap,
    output_dir: str,
    stem: str,
    regions: list[dict[str, Any]] | None = None,
    alpha: float = 0.35,
) -> str:
    """Create overlay image with the ROI map coloured over the grey image.

    Args:
        image: Single-channel image the map was extracted from
        roi_map: Extraction result
        output_dir: Output directory
        stem: Output file stem
        regions: Per-region statistics; their extremum locations are marked
        alpha: Opacity of the label colours

    Returns:
        Path to saved overlay image
    """
    grey = to_display_uint8(image)
    coloured = label2rgb(display_labels(roi_map), image=grey, bg_label=0, alpha=alpha, kind="overlay")
    overlay = cv2.cvtColor((coloured * 255).round().astype(np.uint8), cv2.COLOR_RGB2BGR)

    # Mark extrema: red for maxima, blue for minima
    for region in regions or []:
        color = (0, 0, 255) if region["roi_id"] > 0 else (255, 0, 0)
        cv2.circle(overlay, (region["extremum_x"], region["extremum_y"]), 2, color, -1)

    label_lines = [f"Maxima: {roi_map.positive_count}", f"Minima: {roi_map.negative_count}"]

    # Draw text with outline for visibility
    font = cv2.FONT_HERSHEY_SIMPLEX
    font_scale = 0.7
    thickness = 2

    for i, label in enumerate(label_lines):
        text_pos = (12, 28 + i * 25)
        cv2.putText(overlay, label, text_pos, font, font_scale, (0, 0, 0), thickness + 1, cv2.LINE_AA)
        cv2.putText(overlay, label, text_pos, font, font_scale, (255, 255, 255), thickness, cv2.LINE_AA)

    overlay_path = os.path.join(output_dir, f"{stem}_overlay.png")
    cv2.imwrite(overlay_path, overlay)

    return os.path.abspath(overlay_path)


def save_debug_images(grey: np.ndarray | None, roi_map: ROIMap | None, output_dir: str, stem: str) -> None:
    """Save the filtered grey image and the raw label map.

    The label image is 16 bit: maxima keep their ID, minima -k are stored
    as positive_count + k.

    Args:
        grey: Image handed to the extraction
        roi_map: Extraction result
        output_dir: Output directory
        stem: Output file stem
    """
    if grey is not None:
        debug_path = os.path.join(output_dir, f"{stem}_grey.png")
        if grey.dtype not in (np.uint8, np.uint16):
            grey = to_display_uint8(grey)
        cv2.imwrite(debug_path, grey)

    if roi_map is not None:
        debug_path = os.path.join(output_dir, f"{stem}_labels.png")
        labels = np.clip(display_labels(roi_map), 0, np.iinfo(np.uint16).max).astype(np.uint16)
        cv2.imwrite(debug_path, labels)


def display_labels(roi_map: ROIMap) -> np.ndarray:
    """Label grid with minima IDs moved after the maxima IDs, all non-negative."""
    labels = roi_map.labels.astype(np.int64)
    return np.where(labels < 0, roi_map.positive_count - labels, labels)


def to_display_uint8(image: np.ndarray) -> np.ndarray:
    """Stretch an integer image to the full 8-bit range."""
    image = np.asarray(image)
    if image.dtype == np.uint8:
        return image.copy()
    return cv2.normalize(image.astype(np.float64), None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
