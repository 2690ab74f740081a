"""Per-region statistics for an ROI map."""

from typing import Any

import numpy as np
from skimage.measure import regionprops

from .image import Image
from .roi_map import ROIMap


def calculate_region_metrics(roi_map: ROIMap, image) -> list[dict[str, Any]]:
    """Measure every region of ``roi_map`` against the source intensities.

    Args:
        roi_map: Extraction result
        image: Single-channel Image or array the map was extracted from

    Returns:
        One dictionary per region, maxima first (ascending ID) then minima
        (descending ID)

    Raises:
        ValueError: If image and map dimensions differ
    """
    image = Image.from_array(image)
    image.check_processable("calculate_region_metrics", channels=[1])
    if (image.width, image.height) != (roi_map.width, roi_map.height):
        raise ValueError(
            f"Image is {image.width}x{image.height} but ROI map is {roi_map.width}x{roi_map.height}"
        )

    if roi_map.count == 0:
        return []

    # regionprops only accepts non-negative labels: minima -k become positive_count + k
    positive_count = roi_map.positive_count
    props_labels = np.where(roi_map.labels < 0, positive_count - roi_map.labels, roi_map.labels)
    intensity = np.asarray(image.channel(0))

    regions = []
    for region in regionprops(props_labels, intensity_image=intensity):
        roi_id = region.label if region.label <= positive_count else positive_count - region.label
        rows, cols = region.coords[:, 0], region.coords[:, 1]
        values = intensity[rows, cols]
        extremum = int(np.argmax(values) if roi_id > 0 else np.argmin(values))

        min_row, min_col, max_row, max_col = region.bbox
        centroid_row, centroid_col = region.centroid

        regions.append(
            {
                "roi_id": int(roi_id),
                "polarity": "maxima" if roi_id > 0 else "minima",
                "area_px": int(region.area),
                "centroid_x": float(centroid_col),
                "centroid_y": float(centroid_row),
                "bbox_x": int(min_col),
                "bbox_y": int(min_row),
                "bbox_width": int(max_col - min_col),
                "bbox_height": int(max_row - min_row),
                "extremum_x": int(cols[extremum]),
                "extremum_y": int(rows[extremum]),
                "extremum_value": int(values[extremum]),
                "intensity_min": int(region.intensity_min),
                "intensity_max": int(region.intensity_max),
                "intensity_mean": float(region.intensity_mean),
                "touches_border": bool(
                    min_row == 0 or min_col == 0 or max_row == roi_map.height or max_col == roi_map.width
                ),
            }
        )

    regions.sort(key=lambda r: (r["roi_id"] < 0, abs(r["roi_id"])))
    return regions


def calculate_map_metrics(roi_map: ROIMap, regions: list[dict[str, Any]]) -> dict[str, Any]:
    """Summarize a whole ROI map.

    Args:
        roi_map: Extraction result
        regions: Output of calculate_region_metrics for the same map

    Returns:
        Dictionary with counts and area statistics
    """
    metrics = roi_map.to_dict()

    areas = [r["area_px"] for r in regions]
    if areas:
        largest = max(regions, key=lambda r: r["area_px"])
        metrics.update(
            {
                "mean_area_px": float(np.mean(areas)),
                "median_area_px": float(np.median(areas)),
                "largest_roi_id": largest["roi_id"],
                "largest_area_px": largest["area_px"],
                "border_region_count": sum(1 for r in regions if r["touches_border"]),
            }
        )
    else:
        metrics.update(
            {
                "mean_area_px": None,
                "median_area_px": None,
                "largest_roi_id": None,
                "largest_area_px": None,
                "border_region_count": 0,
            }
        )

    return metrics
